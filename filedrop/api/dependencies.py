"""Request dependencies (composition root).

Routes receive services through these; nothing in an endpoint constructs a
backend or reads settings directly.
"""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from filedrop.application.use_cases.files import (
    FileDeleteService,
    FileQueryService,
    FileUploadService,
)
from filedrop.core.config import Settings, get_settings
from filedrop.domain.exceptions import AuthenticationException
from filedrop.infrastructure.external.storage.registry import BucketRegistry

_http_bearer = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with (falls back to process settings)."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_bucket_registry(request: Request) -> BucketRegistry:
    """Bucket registry bound at application startup."""
    return request.app.state.buckets


def get_upload_service(
    registry: Annotated[BucketRegistry, Depends(get_bucket_registry)],
) -> FileUploadService:
    return FileUploadService(registry)


def get_query_service(
    registry: Annotated[BucketRegistry, Depends(get_bucket_registry)],
) -> FileQueryService:
    return FileQueryService(registry)


def get_delete_service(
    registry: Annotated[BucketRegistry, Depends(get_bucket_registry)],
) -> FileDeleteService:
    return FileDeleteService(registry)


def require_api_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> None:
    """Reject the request unless it carries the configured bearer token.

    With no API_TOKEN configured every request passes. Every failure raises
    the same AuthenticationException; the reason is kept for logs only.
    """
    expected = settings.api_token_value
    if not expected:
        return
    if credentials is None:
        raise AuthenticationException("missing or malformed Authorization header")
    if not hmac.compare_digest(
        credentials.credentials.encode("utf-8"), expected.encode("utf-8")
    ):
        raise AuthenticationException("token mismatch")
