"""
Traducción de excepciones a respuestas HTTP

Todas las respuestas de error tienen la forma {"error": ..., "details"?: ...}
y llevan el correlationId del request, en el body y en el header.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from zentype.core.config import get_settings
from zentype.core.correlation import get_correlation_id
from zentype.core.exceptions import (
    AuthenticationError,
    ProfileAlreadyExistsError,
    ProfileNotFoundError,
    StorageError,
    ValidationError,
    ZentypeError,
)
from zentype.database import classify_error

logger = logging.getLogger(__name__)


def error_response(
    request: Request,
    status_code: int,
    error: str,
    details: Optional[Any] = None,
    headers: Optional[dict] = None,
    **extra: Any
) -> JSONResponse:
    correlation_id = get_correlation_id(request)

    body = {"error": error}
    if details is not None:
        body["details"] = details
    body.update(extra)
    body["correlationId"] = correlation_id

    # El handler de Exception corre fuera del middleware de correlación
    headers = {**(headers or {}), get_settings().correlation_id_header: correlation_id}
    return JSONResponse(status_code=status_code, content=body, headers=headers)
async def handle_validation_error(request: Request, exc: ValidationError):
    logger.warning(f"Validation failed: {exc.errors}")
    return error_response(request, status.HTTP_400_BAD_REQUEST, "Validation failed", exc.errors)


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    details = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    logger.warning(f"Invalid request: {details}")
    return error_response(request, status.HTTP_400_BAD_REQUEST, "Invalid request body", details)


async def handle_authentication_error(request: Request, exc: AuthenticationError):
    logger.warning(f"Authentication failed: {exc}")
    return error_response(
        request,
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def handle_profile_exists(request: Request, exc: ProfileAlreadyExistsError):
    return error_response(request, status.HTTP_409_CONFLICT, "Profile already exists for this user")


async def handle_profile_not_found(request: Request, exc: ProfileNotFoundError):
    # Un envío sin perfil es un problema de integridad de datos, no del cliente
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        str(exc),
    )


async def handle_storage_error(request: Request, exc: StorageError):
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database operation failed",
        str(exc),
        retryable=exc.retryable,
    )


async def handle_app_error(request: Request, exc: ZentypeError):
    logger.error(f"Unhandled application error: {exc}", exc_info=exc)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        str(exc),
    )


async def handle_pymongo_error(request: Request, exc: PyMongoError):
    # Lecturas fuera de una transacción: el error llega sin traducir
    logger.error(f"Database error outside a transaction: {exc!r}")
    return await handle_storage_error(request, classify_error(exc))


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def handle_unexpected_error(request: Request, exc: Exception):
    """Último recurso: 500 sin detalles internos"""
    logger.error(f"Unexpected error: {exc!r}", exc_info=exc)
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(AuthenticationError, handle_authentication_error)
    app.add_exception_handler(ProfileAlreadyExistsError, handle_profile_exists)
    app.add_exception_handler(ProfileNotFoundError, handle_profile_not_found)
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(ZentypeError, handle_app_error)
    app.add_exception_handler(PyMongoError, handle_pymongo_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
