"""CORS middleware.

Adds CORS headers to every HTTP response, error responses included, and
answers every OPTIONS request with 204 before routing or authentication.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

from typing import Callable

from filedrop.middleware._headers import _get_header, _replace_headers

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, Content-Length, X-Requested-With"
PREFLIGHT_MAX_AGE = "86400"


def cors_headers(origin: str | None, allowed_origins: list[str]) -> dict[str, str]:
    """CORS headers for a request from ``origin``.

    An allow-list containing ``*`` or the origin gets the origin reflected
    with credentials allowed; anything else gets ``*`` without credentials.
    """
    origin = origin or "*"
    if "*" in allowed_origins or origin in allowed_origins:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        }
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Credentials": "false",
    }


def preflight_headers(origin: str | None, allowed_origins: list[str]) -> dict[str, str]:
    headers = cors_headers(origin, allowed_origins)
    headers.update(
        {
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Max-Age": PREFLIGHT_MAX_AGE,
        }
    )
    return headers


def CORSMiddleware(app: Callable, allowed_origins: list[str] | None = None) -> Callable:
    """Answer preflight with 204 and decorate all other responses. Raw ASGI."""
    origins = list(allowed_origins or ["*"])

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        origin = _get_header(scope, "origin")

        if scope["method"] == "OPTIONS":
            headers = _replace_headers([], preflight_headers(origin, origins))
            await send({"type": "http.response.start", "status": 204, "headers": headers})
            await send({"type": "http.response.body", "body": b"", "more_body": False})
            return

        extra = cors_headers(origin, origins)

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = _replace_headers(
                    list(message.get("headers", [])), extra
                )
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
