"""HTTP API: routers, endpoints and request dependencies."""

from filedrop.api.router import api_router

__all__ = ["api_router"]
