"""Tests for the traced decorator (no tracer provider configured)."""

import pytest

from filedrop.shared.telemetry.tracing import add_span_attributes, traced


@traced("test.async")
async def _async_op(*, key: str, secret: str) -> str:
    add_span_attributes(key=key)
    return f"{key}:{secret}"


@traced()
def _sync_op(value: int) -> int:
    if value < 0:
        raise ValueError("negative")
    return value * 2


async def test_traced_async_returns_result() -> None:
    assert await _async_op(key="a.txt", secret="s") == "a.txt:s"


def test_traced_sync_returns_result_and_reraises() -> None:
    assert _sync_op(3) == 6
    with pytest.raises(ValueError):
        _sync_op(-1)


def test_traced_keeps_function_metadata() -> None:
    assert _sync_op.__name__ == "_sync_op"
