"""Shared helpers used across layers: utilities and telemetry."""
