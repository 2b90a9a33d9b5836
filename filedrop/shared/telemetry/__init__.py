"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from filedrop.shared.telemetry.logging import get_logger, setup_logging
from filedrop.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from filedrop.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "TelemetryConfig",
    "add_span_attributes",
    "get_logger",
    "get_telemetry",
    "set_telemetry",
    "setup_logging",
    "traced",
]
