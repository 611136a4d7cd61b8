"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from ai_gateway.api.routers import api_router
from ai_gateway.config.settings import Settings, get_settings
from ai_gateway.infrastructure.logging.logger import setup_logging
from ai_gateway.infrastructure.queue.periodic import PeriodicTask
from ai_gateway.infrastructure.storage.kv_store import KeyValueStore
from ai_gateway.orchestrator.context import SessionStore
from ai_gateway.orchestrator.factory import build_orchestrator

logger = logging.getLogger(__name__)


def _validate_startup_config(settings: Settings) -> None:
    """Validate configuration at startup."""
    if settings.storage_backend == "memory":
        logger.warning("storage_backend=memory: audit entries queued offline are lost on restart")
    if settings.escalation_durability == "best_effort":
        logger.warning(
            "escalation_durability=best_effort: escalations the remote rejects are not retained"
        )


def create_app(
    settings: Settings | None = None,
    store: KeyValueStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the FastAPI app; *store* and *transport* override the remote/storage backends."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup and shutdown lifecycle."""
        logger.info("Starting %s", settings.app_name)
        _validate_startup_config(settings)

        orchestrator = build_orchestrator(settings, store=store, transport=transport)
        app.state.orchestrator = orchestrator
        app.state.sessions = SessionStore(
            ttl_seconds=settings.session_ttl_seconds,
            max_history_turns=settings.max_history_turns,
            max_sessions=settings.max_sessions,
        )
        orchestrator.audit.start()
        orchestrator.escalation.start()
        sessions = app.state.sessions

        async def _sweep_sessions() -> None:
            removed = sessions.cleanup_expired()
            if removed:
                logger.info("Removed %s expired sessions", removed)

        session_sweeper = PeriodicTask(
            "session-cleanup", settings.session_cleanup_interval_seconds, _sweep_sessions
        )
        session_sweeper.start()
        app.state.session_sweeper = session_sweeper

        yield
        logger.info("Shutting down %s", settings.app_name)
        await session_sweeper.stop()
        try:
            await orchestrator.aclose()
        except Exception as e:
            logger.error("Error closing gateway: %s", e, exc_info=True)

    app = FastAPI(
        title=settings.app_name,
        description="Compliance-aware AI query gateway",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

    app.include_router(api_router, prefix="/api")
    return app


settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    silence_noisy_loggers=True,
)

app = create_app(settings)
