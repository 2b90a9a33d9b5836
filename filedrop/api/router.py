"""API router aggregation.

Health is public; every file route sits behind the bearer token check.
"""

from fastapi import APIRouter, Depends

from filedrop.api.dependencies import require_api_token
from filedrop.api.endpoints import buckets, files, health, listing, upload

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])

_protected = [Depends(require_api_token)]
api_router.include_router(upload.router, tags=["files"], dependencies=_protected)
api_router.include_router(files.router, tags=["files"], dependencies=_protected)
api_router.include_router(listing.router, tags=["files"], dependencies=_protected)
api_router.include_router(buckets.router, tags=["buckets"], dependencies=_protected)
