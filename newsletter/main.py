"""Newsletter API — FastAPI application factory and process entry point.

Invariants:
    - Settings are loaded once by run() and passed into create_app; no global accessor
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map NewsletterError → structured JSON responses
    - Database pool and email client built on startup, released on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Factory over module-level app: importing this module reads no files, tests
      build the app from in-memory settings
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from newsletter.api.error_handlers import register_error_handlers
from newsletter.api.routes import health, subscriptions, subscriptions_confirm
from newsletter.config import Settings, current_environment, load_settings
from newsletter.infrastructure.database import init_db
from newsletter.infrastructure.email_client import EmailClient
from newsletter.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings) -> FastAPI:
    """Build the FastAPI app around an already-loaded Settings value."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(
            settings.application.log_level, settings.application.log_format,
        )
        manager = init_db(settings.database)
        app.state.email_client = EmailClient.from_settings(settings.email_client)
        logger.info(
            "Newsletter API started",
            extra={"environment": current_environment().value},
        )
        yield
        await app.state.email_client.aclose()
        await manager.dispose()
        logger.info("Newsletter API shutting down")

    app = FastAPI(title="Newsletter API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.include_router(health.router)
    app.include_router(subscriptions.router)
    app.include_router(subscriptions_confirm.router)

    register_error_handlers(app)
    return app


def run() -> None:
    """Process entry point: load settings, build the app, serve it."""
    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.application.host,
        port=settings.application.port,
    )
