"""CORS preflight and response header tests."""

from httpx import AsyncClient

ORIGIN = "https://app.example"


async def test_preflight_returns_204_with_methods(client: AsyncClient) -> None:
    """OPTIONS on any path answers 204 with DELETE among the allowed methods."""
    response = await client.options(
        "/files/anything.txt",
        headers={"Origin": ORIGIN, "Access-Control-Request-Method": "DELETE"},
    )
    assert response.status_code == 204
    assert "DELETE" in response.headers["access-control-allow-methods"]
    assert "Authorization" in response.headers["access-control-allow-headers"]
    assert response.headers["access-control-allow-origin"] == ORIGIN
    assert response.headers["access-control-max-age"] == "86400"


async def test_preflight_bypasses_auth(secured_client: AsyncClient) -> None:
    """Preflight succeeds without a token on a protected route."""
    response = await secured_client.options("/upload", headers={"Origin": ORIGIN})
    assert response.status_code == 204


async def test_wildcard_reflects_origin_with_credentials(client: AsyncClient) -> None:
    """With ALLOWED_ORIGINS=* the request origin is reflected and credentials allowed."""
    response = await client.get("/health", headers={"Origin": ORIGIN})
    assert response.headers["access-control-allow-origin"] == ORIGIN
    assert response.headers["access-control-allow-credentials"] == "true"


async def test_allow_listed_origin_is_reflected(client_for) -> None:
    async with client_for(allowed_origins=f"{ORIGIN}, https://other.example") as ac:
        response = await ac.get("/health", headers={"Origin": ORIGIN})
    assert response.headers["access-control-allow-origin"] == ORIGIN
    assert response.headers["access-control-allow-credentials"] == "true"


async def test_unlisted_origin_gets_wildcard_without_credentials(client_for) -> None:
    """An origin outside the allow-list gets '*' and credentials disabled."""
    async with client_for(allowed_origins=ORIGIN) as ac:
        response = await ac.get("/health", headers={"Origin": "https://evil.example"})
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-credentials"] == "false"


async def test_error_responses_carry_cors_headers(secured_client: AsyncClient) -> None:
    """401 and 404 bodies are readable cross-origin."""
    response = await secured_client.get("/list", headers={"Origin": ORIGIN})
    assert response.status_code == 401
    assert response.headers["access-control-allow-origin"] == ORIGIN


async def test_payload_too_large_carries_cors_headers(client_for) -> None:
    async with client_for(max_upload_size=16) as ac:
        response = await ac.post(
            "/upload",
            headers={"Origin": ORIGIN},
            files={"file": ("a.bin", b"x" * 1024, "application/octet-stream")},
        )
    assert response.status_code == 413
    assert response.headers["access-control-allow-origin"] == ORIGIN
