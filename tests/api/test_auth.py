"""Bearer token authentication tests."""

import pytest
from httpx import AsyncClient

PROTECTED = [
    ("GET", "/list"),
    ("GET", "/buckets"),
    ("GET", "/files/a.txt"),
    ("DELETE", "/files/a.txt"),
    ("POST", "/upload"),
]


@pytest.mark.parametrize(("method", "path"), PROTECTED)
async def test_missing_token_returns_401(
    secured_client: AsyncClient, method: str, path: str
) -> None:
    """Every file route rejects requests without a token."""
    response = await secured_client.request(method, path)
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json() == {"success": False, "error": "Authentication required"}


@pytest.mark.parametrize(
    "authorization",
    ["Bearer wrong-token", "Basic dXNlcjpwYXNz", "Bearer", "test-api-token"],
)
async def test_bad_credentials_return_same_401(
    secured_client: AsyncClient, authorization: str
) -> None:
    """Wrong, malformed and non-bearer credentials all get the same answer."""
    response = await secured_client.get("/buckets", headers={"Authorization": authorization})
    assert response.status_code == 401
    assert response.json()["error"] == "Authentication required"


async def test_valid_token_is_accepted(
    secured_client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    """The configured token opens every route."""
    response = await secured_client.get("/buckets", headers=auth_headers)
    assert response.status_code == 200

    response = await secured_client.post(
        "/upload",
        headers=auth_headers,
        files={"file": ("a.txt", b"a", "text/plain")},
    )
    assert response.status_code == 200


async def test_no_configured_token_accepts_anonymous(client: AsyncClient) -> None:
    """Without API_TOKEN every request authenticates."""
    response = await client.get("/list")
    assert response.status_code == 200


async def test_auth_runs_after_size_limit(client_for) -> None:
    """An oversized upload is answered with 413 even without credentials."""
    async with client_for(api_token="secret", max_upload_size=16) as ac:
        response = await ac.post(
            "/upload", files={"file": ("a.bin", b"x" * 1024, "application/octet-stream")}
        )
    assert response.status_code == 413
