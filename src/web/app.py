"""
Application FastAPI de Suasor.

Initialise l'application web avec le Container DI, enregistre les
gestionnaires d'erreurs et monte les routes JSON.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from ..container import Container
from ..logging_config import configure_logging
from .deps import envelope
from .errors import register_error_handlers
from .routes.client_lists import router as client_lists_router
from .routes.clients import router as clients_router
from .routes.lists import router as lists_router
from .routes.media import router as media_router
from .routes.metadata import router as metadata_router
from .routes.user_data import router as user_data_router

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise le Container DI au démarrage et ferme les clients HTTP à l'arrêt."""
    container = getattr(app.state, "container", None)
    if container is None:
        container = Container()
        settings = container.config()
        configure_logging(
            log_level=settings.log_level,
            log_file=settings.log_file,
            rotation_size=settings.log_rotation_size,
            retention_count=settings.log_retention_count,
        )
        container.database.init()
        app.state.container = container
    logger.info("Démarrage de Suasor", version=VERSION)
    yield
    await container.provider_factory().close_all()
    await container.tmdb_client().close()
    logger.info("Arrêt de Suasor")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Construit l'application ; un container peut être fourni (tests)."""
    app = FastAPI(title="Suasor", version=VERSION, lifespan=lifespan)
    if container is not None:
        app.state.container = container

    register_error_handlers(app)

    @app.get("/health", tags=["health"])
    async def health():
        return envelope({"status": "ok", "version": VERSION})

    # Routes (listes client avant média : /clients/media/{id}/{kind}/search)
    app.include_router(clients_router)
    app.include_router(client_lists_router)
    app.include_router(media_router)
    app.include_router(lists_router)
    app.include_router(user_data_router)
    app.include_router(metadata_router)
    return app


app = create_app()
