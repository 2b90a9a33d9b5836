"""Listing endpoint: one page of a bucket, folders rolled up by delimiter."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from filedrop.api.dependencies import get_query_service
from filedrop.application.use_cases.files import FileQueryService, normalize_limit
from filedrop.schemas.common import ErrorResponse
from filedrop.schemas.files import ListResponse

router = APIRouter()


@router.get(
    "/list",
    response_model=ListResponse,
    responses={500: {"model": ErrorResponse, "description": "Storage failure"}},
)
async def list_files(
    query: Annotated[FileQueryService, Depends(get_query_service)],
    prefix: Annotated[str, Query()] = "",
    delimiter: Annotated[str, Query()] = "/",
    limit: Annotated[str | None, Query(description="1-1000; invalid values mean 100")] = None,
    cursor: Annotated[str | None, Query()] = None,
    bucket: Annotated[str | None, Query()] = None,
) -> ListResponse:
    """List immediate children of ``prefix``: folders first, then files, each by name."""
    result = await query.list_files(
        prefix=prefix,
        delimiter=delimiter or "/",
        limit=normalize_limit(limit),
        cursor=cursor or None,
        bucket=bucket,
    )
    return ListResponse.from_result(result)
