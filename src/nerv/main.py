"""FastAPI application factory.

Learn: create_app() returns a configured FastAPI instance. It builds the
Database handle from settings and keeps both on app.state; nothing else
holds a database reference. Lifespan creates tables at startup and
disposes the engine at shutdown.

Serve with: uvicorn --factory nerv.main:create_app (or `nerv serve`).
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nerv import __version__
from nerv.api import api_router
from nerv.config import Settings, get_settings
from nerv.db.engine import Database
from nerv.errors import register_exception_handlers
from nerv.log import configure_logging
from nerv.middleware.request_id import RequestIdMiddleware
from nerv.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: FastAPI lifespan replaces on_event("startup") / on_event("shutdown").
    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    db: Database = app.state.db

    logger.info(
        "nerv.starting",
        version=__version__,
        environment=settings.environment,
        database=db.url.render_as_string(hide_password=True),
    )
    await db.create_all()

    yield

    logger.info("nerv.shutdown")
    await db.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Nerv",
        description="Academic organizer API — courses, assignments and notes",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.database_url, echo=settings.debug)

    register_exception_handlers(app)

    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app
