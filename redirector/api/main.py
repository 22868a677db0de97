"""
Redirector API application.

Run with ``uvicorn redirector.api.main:create_app --factory``.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from redirector import __version__
from redirector.adapters.sqlite.repos import SQLiteUrlMapRepo
from redirector.api.deps import Settings, build_redirect_chain, get_settings
from redirector.api.routes import public_redirects
from redirector.app_shell.config import configure_logging, validate_settings
from redirector.components.redirects import Handler
from redirector.shell.http.health import DatabaseCheck, StartupTracker, create_health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    app.state.startup.mark_started()
    logger.info("Redirector serving with %r", app.state.redirect_handler)
    yield


def create_app(settings: Settings | None = None, handler: Handler | None = None) -> FastAPI:
    """
    Build the application.

    The handler chain is built from ``settings`` unless one is passed in.
    Source decode errors and (with strict_schema) schema errors raise here,
    before the app serves anything.
    """
    settings = settings or get_settings()
    validate_settings(settings)
    configure_logging(settings.log_level)

    if handler is None:
        handler = build_redirect_chain(settings)

    app = FastAPI(
        title="Redirector",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings
    app.state.redirect_handler = handler

    app.state.startup = StartupTracker()
    database = DatabaseCheck(SQLiteUrlMapRepo(settings.db_path).ping if settings.db_path else None)

    # --- Routers ---
    # Health first: the redirect router claims every remaining path.
    app.include_router(create_health_router(database, app.state.startup, version=__version__))
    app.include_router(public_redirects.router)

    return app
