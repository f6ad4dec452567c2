"""FastAPI application entrypoint and composition root."""
from __future__ import annotations

from fastapi import FastAPI
from sqlalchemy.orm import Session, sessionmaker

from bookclub.api.errors import register_exception_handlers
from bookclub.api.routes import register_routes
from bookclub.core.config import Settings, get_settings
from bookclub.core.logging import configure_logging
from bookclub.db.session import create_session_factory
from bookclub.obs import PrometheusMiddleware, initialise_tracing, instrument_fastapi_app, metrics_router


def create_application(
    settings: Settings | None = None,
    session_factory: sessionmaker[Session] | None = None,
) -> FastAPI:
    """Application factory used by ASGI servers and tests.

    The session factory is built here once and handed to request handlers
    through ``app.state``; nothing below this point creates its own engine.
    """
    configure_logging()
    settings = settings or get_settings()

    if settings.enable_tracing:
        initialise_tracing(service_name=settings.app_name, endpoint=settings.otel_exporter_endpoint)

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
    )
    application.state.settings = settings
    application.state.session_factory = session_factory or create_session_factory(settings)

    if settings.enable_metrics:
        application.add_middleware(PrometheusMiddleware)
        application.include_router(metrics_router)
    register_exception_handlers(application)
    register_routes(application)

    if settings.enable_tracing:
        instrument_fastapi_app(application)

    return application


app = create_application()
