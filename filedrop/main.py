"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers, bucket
registry. No business logic here. See filedrop.core.lifespan and
filedrop.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI

from filedrop.api import api_router
from filedrop.core.config import Settings, get_settings
from filedrop.core.exception_handlers import register_exception_handlers
from filedrop.core.lifespan import create_lifespan
from filedrop.infrastructure.external.storage import BucketRegistry, build_bucket_registry
from filedrop.middleware import (
    CORSMiddleware,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
)
from filedrop.shared.telemetry.logging import setup_logging


def create_app(
    settings: Settings | None = None,
    registry: BucketRegistry | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        settings: Settings to use; defaults to get_settings().
        registry: Pre-built bucket registry; defaults to one built from settings.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.settings = settings
    app.state.buckets = registry if registry is not None else build_bucket_registry(settings)

    register_exception_handlers(app)

    # Middleware: last added = outermost. Order: CORS -> size limit -> request logging.
    app.add_middleware(RequestLoggingMiddleware, header_name=settings.request_id_header)
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_upload_size)
    app.add_middleware(CORSMiddleware, allowed_origins=settings.allowed_origin_list)

    app.include_router(api_router)

    return app


def run() -> None:
    """Serve the app with uvicorn (``filedrop-server``)."""
    import uvicorn

    uvicorn.run("filedrop.main:create_app", factory=True, host="0.0.0.0", port=8000)
