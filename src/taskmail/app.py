"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskmail import __version__
from taskmail.config import Settings, get_settings_eager
from taskmail.db.engine import Database
from taskmail.email.session import TransportSessionManager
from taskmail.notifier import Notifier
from taskmail.pollers import IMAPPoller, POP3Poller

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: create the database and mail services. Shutdown: dispose."""
    settings: Settings = app.state.settings

    db = Database(settings.database_url)
    db.create_all()
    app.state.db = db
    logger.info("database_ready")

    sessions = TransportSessionManager(settings)
    app.state.notifier = Notifier(sessions, settings.smtp)
    app.state.imap_poller = IMAPPoller(
        sessions,
        folder=settings.imap.folder,
        limit=settings.recent_message_limit,
    )
    app.state.pop3_poller = POP3Poller(sessions, limit=settings.recent_message_limit)
    logger.info(
        "mail_services_ready",
        smtp_host=settings.smtp.host,
        imap_host=settings.imap.host,
        pop3_host=settings.pop3.host,
        max_concurrent_sessions=settings.max_concurrent_sessions,
    )
    yield
    db.dispose()
    logger.info("shutdown_complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    if settings is None:
        settings = get_settings_eager()

    app = FastAPI(
        title="Task Mail API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from taskmail.routers.tasks import router as tasks_router

    app.include_router(tasks_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": "taskmail"}

    return app
