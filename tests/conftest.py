"""Pytest configuration and fixtures for filedrop.

HTTP tests run against filedrop.main:create_app() through httpx's
ASGITransport, with in-memory buckets by default. local_registry binds
filesystem buckets under tmp_path; nothing touches the network.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from filedrop.core.config import Settings, get_settings
from filedrop.infrastructure.external.storage.local_storage import LocalStorageService
from filedrop.infrastructure.external.storage.memory_storage import MemoryStorageService
from filedrop.infrastructure.external.storage.registry import BucketRegistry
from filedrop.main import create_app

TEST_TOKEN = "test-api-token"


def _settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "storage_backend": "memory",
        "buckets": "FILES,ARCHIVE",
        "telemetry_enabled": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry() -> BucketRegistry:
    """Fresh FILES (default) and ARCHIVE buckets."""
    return BucketRegistry(
        [("FILES", MemoryStorageService("FILES")), ("ARCHIVE", MemoryStorageService("ARCHIVE"))]
    )


@pytest.fixture
def local_registry(tmp_path: Path) -> BucketRegistry:
    """FILES (default) and ARCHIVE buckets on the local filesystem backend."""
    return BucketRegistry(
        [
            ("FILES", LocalStorageService(tmp_path / "FILES")),
            ("ARCHIVE", LocalStorageService(tmp_path / "ARCHIVE")),
        ]
    )


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build memory-backend Settings with keyword overrides."""
    return _settings


@pytest.fixture
def app(registry: BucketRegistry) -> FastAPI:
    """App without an API token (auth disabled)."""
    return create_app(_settings(), registry=registry)


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client_for(registry: BucketRegistry):
    """Open a client on an app built with custom settings.

    Usage: ``async with client_for(api_token="x") as ac: ...``. Pass
    ``registry=`` to bind other buckets.
    """

    @asynccontextmanager
    async def _open(
        registry_override: BucketRegistry | None = None, **overrides: Any
    ) -> AsyncIterator[AsyncClient]:
        bound = registry if registry_override is None else registry_override
        app = create_app(_settings(**overrides), registry=bound)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

    return _open


@pytest.fixture
async def secured_client(client_for) -> AsyncIterator[AsyncClient]:
    """Client for an app that requires TEST_TOKEN; sends no credentials itself."""
    async with client_for(api_token=TEST_TOKEN) as ac:
        yield ac


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers accepted by secured_client."""
    return {"Authorization": f"Bearer {TEST_TOKEN}"}
