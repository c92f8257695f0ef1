"""
Entry point de la API
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from zentype.core.config import get_settings
from zentype.core.cors import OriginPolicy, WebClientCORSMiddleware
from zentype.core.correlation import CorrelationIdMiddleware
from zentype.core.error_handlers import register_exception_handlers
from zentype.core.logging_config import configure_logging
from zentype.database import MongoDatabase, create_indexes
from zentype.services.submission_service import parse_projections

from zentype.controllers.health_controller import router as health_router
from zentype.controllers.submission_controller import router as submission_router
from zentype.controllers.profile_controller import router as profile_router
from zentype.controllers.leaderboard_controller import router as leaderboard_router
from zentype.controllers.tests_controller import router as tests_router

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Falla al arrancar si las proyecciones configuradas no existen
    parse_projections(settings.projection_names())

    database = MongoDatabase(
        settings.mongodb_uri,
        db_name=settings.mongodb_db_name,
        timeout_ms=settings.mongodb_timeout_ms,
        max_commit_time_ms=settings.transaction_max_commit_ms,
    )
    await database.connect()
    if settings.create_indexes_on_startup:
        await create_indexes(database.get_db())

    app.state.database = database
    logger.info(f"Leaderboard windows use {settings.leaderboard_timezone}")
    yield
    await database.disconnect()

# Creo la app
app = FastAPI(
    title="ZenType API",
    description="Backend de ZenType: resultados de tests de tipeo, estadísticas y leaderboards",
    version="1.0.0",
    lifespan=lifespan
)

# Orden: el último middleware agregado es el más externo
app.add_middleware(
    WebClientCORSMiddleware,
    policy=OriginPolicy.from_settings(settings),
    correlation_header=settings.correlation_id_header,
)
app.add_middleware(CorrelationIdMiddleware, header_name=settings.correlation_id_header)

register_exception_handlers(app)

# Agrego todos los routers de los controllers al app
app.include_router(health_router)
app.include_router(submission_router)
app.include_router(profile_router)
app.include_router(leaderboard_router)
app.include_router(tests_router)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "ZenType API",
        "version": "1.0.0",
        "docs": "/docs"  # Link a la documentación interactiva de Swagger
    }
