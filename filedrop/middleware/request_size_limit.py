"""Request body size limit middleware.

Rejects requests whose declared Content-Length exceeds the configured maximum
(max_upload_size). The check is advisory: bodies without a Content-Length are
not counted.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming and background tasks.
"""

import json
import logging
from typing import Callable

from filedrop.domain.exceptions import PayloadTooLargeException
from filedrop.middleware._headers import _get_header

logger = logging.getLogger(__name__)


async def _send_413(send: Callable, max_bytes: int, actual: int) -> None:
    """Send 413 Payload Too Large response."""
    body = json.dumps(PayloadTooLargeException(max_bytes, actual).to_dict()).encode()
    await send({
        "type": "http.response.start",
        "status": 413,
        "headers": [
            (b"content-type", b"application/json"),
            (b"content-length", str(len(body)).encode()),
        ],
    })
    await send({
        "type": "http.response.body",
        "body": body,
        "more_body": False,
    })


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose Content-Length exceeds max_bytes. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        content_length_str = _get_header(scope, "content-length")
        if content_length_str:
            try:
                length = int(content_length_str)
            except ValueError:
                length = None
            if length is not None and length > max_bytes:
                logger.warning(
                    "Rejected %s %s: Content-Length %d exceeds %d",
                    scope["method"],
                    scope["path"],
                    length,
                    max_bytes,
                )
                await _send_413(send, max_bytes, length)
                return

        await app(scope, receive, send)

    return asgi_app
