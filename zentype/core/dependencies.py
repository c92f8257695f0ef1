"""
Dependencies de FastAPI para autenticacion e inyeccion de BD
"""

from typing import Annotated, Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from zentype.core.config import Settings, get_settings
from zentype.core.exceptions import AuthenticationError
from zentype.core.security import VerifiedIdentity, verify_access_token
from zentype.database import MongoDatabase
from zentype.services.submission_service import SubmissionService, parse_projections

# Esquema de seguridad: espera un header "Authorization: Bearer <token>"
# auto_error=False para responder nosotros con 401 y el formato de error de la API
bearer_scheme = HTTPBearer(auto_error=False)


def get_database(request: Request) -> MongoDatabase:
    """La conexión la crea el lifespan y queda en app.state"""
    return request.app.state.database


def resolve_identity(credentials: Optional[HTTPAuthorizationCredentials]) -> VerifiedIdentity:
    """
    Valida el JWT del usuario.

    Falla con AuthenticationError si falta el header, no es Bearer o el
    token no se puede verificar.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    return verify_access_token(credentials.credentials)


async def get_current_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]
) -> VerifiedIdentity:
    """Dependency para los endpoints que requieren autenticacion"""
    return resolve_identity(credentials)


def get_submission_service(
    database: Annotated[MongoDatabase, Depends(get_database)],
    settings: Annotated[Settings, Depends(get_settings)]
) -> SubmissionService:
    return SubmissionService(
        database,
        projections=parse_projections(settings.projection_names()),
        tz=ZoneInfo(settings.leaderboard_timezone)
    )


# Alias de tipos para que se vea mas limpio en los endpoints
CurrentIdentity = Annotated[VerifiedIdentity, Depends(get_current_identity)]
BearerCredentials = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]
Database = Annotated[MongoDatabase, Depends(get_database)]
Submissions = Annotated[SubmissionService, Depends(get_submission_service)]
