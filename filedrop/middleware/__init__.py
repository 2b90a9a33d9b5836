"""ASGI middleware: CORS, request size limit, request id and access logging."""

from filedrop.middleware.cors import CORSMiddleware
from filedrop.middleware.request_logging import RequestLoggingMiddleware
from filedrop.middleware.request_size_limit import RequestSizeLimitMiddleware

__all__ = [
    "CORSMiddleware",
    "RequestLoggingMiddleware",
    "RequestSizeLimitMiddleware",
]
