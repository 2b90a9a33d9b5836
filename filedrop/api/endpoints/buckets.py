"""Bucket discovery endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from filedrop.api.dependencies import get_query_service
from filedrop.application.use_cases.files import FileQueryService
from filedrop.schemas.buckets import BucketListResponse
from filedrop.schemas.common import ErrorResponse

router = APIRouter()


@router.get(
    "/buckets",
    response_model=BucketListResponse,
    responses={404: {"model": ErrorResponse, "description": "No buckets available"}},
)
def list_buckets(
    query: Annotated[FileQueryService, Depends(get_query_service)],
) -> BucketListResponse:
    """Return bound bucket names (binding order) and the default bucket."""
    result = query.list_buckets()
    return BucketListResponse(buckets=result.names, default=result.default)
