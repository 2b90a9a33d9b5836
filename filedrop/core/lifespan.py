"""Application lifespan: startup and shutdown.

Single place for startup/shutdown logic. Buckets are bound in create_app,
so this only wires logging and telemetry.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from filedrop.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: telemetry (if enabled). Shutdown: telemetry flush.
    """
    settings = getattr(app.state, "settings", None) or get_settings()

    registry = getattr(app.state, "buckets", None)

    # ---- Startup ----
    if settings.telemetry_enabled:
        from filedrop.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
            storage_backend=settings.storage_backend,
            buckets=registry.names() if registry is not None else (),
            default_bucket=registry.default_name if registry is not None else None,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        telemetry.instrument_logging()
        logger.info("Telemetry initialized")

    logger.info(
        "%s %s started with buckets: %s",
        settings.app_name,
        settings.app_version,
        ", ".join(registry.names()) if registry is not None else "none",
    )

    yield

    # ---- Shutdown ----
    from filedrop.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
