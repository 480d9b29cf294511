"""
Webhook Inbox - FastAPI Application

Administrative backend for inspecting inbound webhooks.
Provides:
- Webhook log capture, listing and clearing
- An inbound receiver that logs every delivery
- Test-suite dashboard queries against the hosted database
- Diagnostics, health checks and Prometheus metrics
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from webhook_inbox import __version__
from webhook_inbox.api.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    get_cors_origins,
)
from webhook_inbox.api.routes import beta, diagnostics, health, suites, webhook_logs, webhooks
from webhook_inbox.config import Settings, get_settings
from webhook_inbox.db.postgrest import PostgrestClient
from webhook_inbox.kernel.http.errors import register_exception_handlers
from webhook_inbox.kernel.time import utc_now
from webhook_inbox.webhook_logs.factory import build_webhook_log_store
from webhook_inbox.webhook_logs.store import WebhookLogStore

# Map log level string to logging constant
_LOG_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def configure_logging(settings: Settings) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
            if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _LOG_LEVEL_MAP.get(settings.log_level.lower(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()


def create_app(
    settings: Settings | None = None,
    *,
    webhook_log_store: WebhookLogStore | None = None,
    postgrest_client: PostgrestClient | None = None,
) -> FastAPI:
    """Build the application and the objects it owns.

    The webhook log store and the hosted database client live on
    `app.state`; the lifespan starts them once and closes them on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    store = webhook_log_store or build_webhook_log_store(settings)
    postgrest = postgrest_client or PostgrestClient(
        base_url=settings.supabase_url,
        service_role_key=settings.supabase_service_role_key,
        timeout_seconds=settings.supabase_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan - startup and shutdown."""
        logger.info(
            "Starting Webhook Inbox",
            version=__version__,
            environment=settings.environment,
            webhook_log_backend=store.backend,
        )

        await store.start()
        if not postgrest.configured:
            logger.info("Hosted database not configured; test-suite endpoints will fail")

        yield

        logger.info("Shutting down Webhook Inbox")
        await store.close()
        await postgrest.close()

    app = FastAPI(
        title="Webhook Inbox API",
        description="Capture, inspect and clear inbound webhook deliveries",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.webhook_log_store = store
    app.state.postgrest = postgrest
    app.state.started_at = utc_now()

    register_exception_handlers(app)

    # Middleware (order matters - first added = last executed)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Prometheus metrics endpoint
    app.mount("/metrics", make_asgi_app())

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(beta.router)
    app.include_router(webhook_logs.router, prefix="/api")
    app.include_router(webhooks.router, prefix="/api")
    app.include_router(suites.router, prefix="/api")
    app.include_router(diagnostics.router, prefix="/api")

    @app.get("/api")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Webhook Inbox API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "metrics": "/metrics",
        }

    return app


app = create_app()
