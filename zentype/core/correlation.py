"""
Correlation IDs para trazar cada request de punta a punta

Formato: req-{timestamp en ms}-{13 caracteres aleatorios}
"""

import re
import secrets
import string
import time
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

CORRELATION_ID_PATTERN = re.compile(r"^req-\d{13}-[a-z0-9]{13}$")
_ALPHABET = string.ascii_lowercase + string.digits

# Se lee desde el filtro de logging, "-" cuando no hay request en curso
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


def generate_correlation_id() -> str:
    """Genera un ID nuevo con el formato req-{timestamp}-{random}"""
    timestamp = int(time.time() * 1000)
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(13))
    return f"req-{timestamp}-{random_part}"


def is_valid_correlation_id(correlation_id: Optional[str]) -> bool:
    """Chequea que el string tenga el formato que generamos nosotros"""
    if not correlation_id or not isinstance(correlation_id, str):
        return False
    return bool(CORRELATION_ID_PATTERN.match(correlation_id))


def get_correlation_id(request: Request) -> str:
    """Correlation ID del request actual (lo deja el middleware)"""
    return getattr(request.state, "correlation_id", None) or correlation_id_var.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Toma el correlation ID del header (o genera uno) y lo devuelve
    en la respuesta, sea exitosa o no.
    """

    def __init__(self, app, header_name: str = "x-correlation-id"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        correlation_id = (request.headers.get(self.header_name) or "").strip()
        if not correlation_id:
            correlation_id = generate_correlation_id()

        request.state.correlation_id = correlation_id
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)

        response.headers[self.header_name] = correlation_id
        return response
