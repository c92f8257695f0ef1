"""
Seguridad: emisión y verificación de los JWT que llegan como Bearer
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from zentype.core.config import get_settings
from zentype.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedIdentity:
    """Lo que sabemos del usuario después de verificar su token"""

    user_id: str
    email: Optional[str] = None


def create_access_token(user_id: str, email: Optional[str] = None) -> str:
    """
    Crea un JWT para que el usuario pueda hacer requests autenticados

    El JWT contiene el user_id y expira según `jwt_expire_minutes`
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        "sub": user_id,      # Subject: el usuario
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
        "iat": now,          # Issued at (cuándo se creó)
    }
    if email:
        payload["email"] = email

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> VerifiedIdentity:
    """
    Decodifica y valida un JWT

    Lanza AuthenticationError si está expirado, mal formado o firmado por otro
    """
    if not token:
        raise AuthenticationError("Authentication required")

    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError:
        logger.warning("Rejected expired bearer token")
        raise AuthenticationError("Token expired")
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise AuthenticationError("Invalid authentication token")

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise AuthenticationError("Invalid token payload")

    return VerifiedIdentity(user_id=user_id, email=payload.get("email"))
