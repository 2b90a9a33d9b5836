"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /health returns 200 and status ok."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_health_is_public(secured_client: AsyncClient) -> None:
    """GET /health needs no token even when one is configured."""
    response = await secured_client.get("/health")
    assert response.status_code == 200


async def test_response_carries_request_id(client: AsyncClient) -> None:
    """A valid client request id is echoed; a missing one is generated."""
    response = await client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["x-request-id"] == "abc-123"

    response = await client.get("/health")
    assert response.headers.get("x-request-id")


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    """Request ids with characters outside the safe set are not echoed."""
    response = await client.get("/health", headers={"X-Request-ID": "bad id;value"})
    assert response.headers["x-request-id"] != "bad id;value"


async def test_wrong_method_returns_json_error(client: AsyncClient) -> None:
    """A wrong method on a known path is answered by the framework with 405."""
    response = await client.put("/upload")
    assert response.status_code == 405
    assert response.json()["success"] is False
