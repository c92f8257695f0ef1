"""
Controlador de salud - Endpoint de comprobación del servicio
"""

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from zentype.core.dependencies import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Estado de la API y de MongoDB."""
    status: str  # ok | degraded
    database: str  # connected | disconnected
    database_name: str


@router.get("/health", response_model=HealthResponse)
async def health_check(database: Database, response: Response):
    """
    Hace ping a MongoDB.

    Si la base no responde devuelve 503 para que el balanceador saque la instancia.
    """
    reachable = await database.ping()
    if not reachable:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="ok" if reachable else "degraded",
        database="connected" if reachable else "disconnected",
        database_name=database.db_name
    )
