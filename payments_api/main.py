"""Payments API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (health, versioned payments, optional admin)
    - Global error handlers map PaymentsError → status code + JSON body
    - Optional middleware (CORS, gzip, access log, metrics, rate limit, timeout)
      driven by settings, not hardcoded
    - Item store opened on startup and closed on shutdown via lifespan

Design Decisions:
    - create_app(settings) factory: tests build apps with their own settings;
      the module-level app uses the environment
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from payments_api.api.error_handlers import register_error_handlers
from payments_api.api.request_limits import RequestTimeoutMiddleware, register_rate_limit
from payments_api.api.request_logging import register_request_logging
from payments_api.api.request_metrics import register_request_metrics
from payments_api.api.routes import admin, health, metrics, payments
from payments_api.config import Settings, get_settings
from payments_api.infrastructure.database import close_store, init_store
from payments_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    store = await init_store(settings.repo_config())
    for route in app.routes:
        for method in sorted(getattr(route, "methods", None) or ()):
            logger.info(f"Mounted route {method} {route.path}")
    logger.info(
        f"Payments API started at {settings.base_url} "
        f"(listening on {settings.listen_host}:{settings.listen_port}, "
        f"store {store.description()})",
    )
    yield
    logger.info("Payments API shutting down")
    await close_store()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Payments API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    # add_middleware wraps: the last one added runs first
    if settings.rate is not None:
        register_rate_limit(app, settings.rate, settings.error_details)
    if settings.request_timeout > 0:
        app.add_middleware(
            RequestTimeoutMiddleware,
            timeout=settings.request_timeout,
            expose_details=settings.error_details,
        )
    if settings.metrics_enabled:
        register_request_metrics(app)
    if settings.http_logs:
        register_request_logging(app)
    if settings.compress:
        app.add_middleware(GZipMiddleware, minimum_size=500)
    if settings.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
            expose_headers=["Link"],
            allow_credentials=True,
            max_age=300,
        )

    register_error_handlers(app, expose_details=settings.error_details)

    app.include_router(health.router)
    app.include_router(payments.router, prefix=f"/{settings.api_version}")
    if settings.admin_routes:
        app.include_router(admin.router)
    if settings.metrics_enabled:
        app.include_router(metrics.router)
    return app


app = create_app()
