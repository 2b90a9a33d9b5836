"""Download and delete endpoints for a single object."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from filedrop.api.dependencies import get_delete_service, get_query_service
from filedrop.application.use_cases.files import FileDeleteService, FileQueryService
from filedrop.domain.entities import ObjectInfo
from filedrop.schemas.common import ErrorResponse
from filedrop.schemas.files import DeleteResponse
from filedrop.shared.utils.files import DEFAULT_CONTENT_TYPE, split_key

router = APIRouter()

CACHE_CONTROL = "public, max-age=31536000"
METADATA_HEADER_PREFIX = "X-Metadata-"
# RFC 7230 tchar, minus '%' which marks our own escapes
_HEADER_NAME_SAFE = "!#$&'*+-.^_`|~"


def _is_plain_header_value(value: str) -> bool:
    return all(0x20 <= ord(ch) < 0x7F for ch in value)


def content_disposition(key: str) -> str:
    """``inline`` disposition naming the key's base name.

    Non-ASCII names get an ASCII fallback plus an RFC 5987 ``filename*``.
    """
    _, base = split_key(key)
    if _is_plain_header_value(base) and '"' not in base and "\\" not in base:
        return f'inline; filename="{base}"'
    fallback = "".join(
        ch if 0x20 <= ord(ch) < 0x7F and ch not in '"\\' else "_" for ch in base
    )
    return f"inline; filename=\"{fallback}\"; filename*=UTF-8''{quote(base, safe='')}"


def metadata_headers(custom_metadata: dict[str, str]) -> dict[str, str]:
    """One ``X-Metadata-<name>`` header per entry; unsafe names and values are percent-encoded."""
    headers: dict[str, str] = {}
    for name, value in custom_metadata.items():
        header_name = METADATA_HEADER_PREFIX + quote(name, safe=_HEADER_NAME_SAFE)
        headers[header_name] = (
            value if _is_plain_header_value(value) else quote(value, safe="")
        )
    return headers


def object_headers(info: ObjectInfo) -> dict[str, str]:
    headers = {
        "Content-Type": info.content_type or DEFAULT_CONTENT_TYPE,
        "Content-Disposition": content_disposition(info.key),
        "Cache-Control": CACHE_CONTROL,
    }
    if info.etag:
        headers["ETag"] = info.http_etag
    headers.update(metadata_headers(info.custom_metadata))
    return headers


@router.get(
    "/files/{key:path}",
    response_class=Response,
    responses={
        200: {"description": "Object body", "content": {"application/octet-stream": {}}},
        400: {"model": ErrorResponse, "description": "File name is required"},
        404: {"model": ErrorResponse, "description": "File not found"},
    },
)
async def download_file(
    key: str,
    query: Annotated[FileQueryService, Depends(get_query_service)],
    bucket: Annotated[str | None, Query()] = None,
) -> Response:
    """Return the object's bytes with its stored content type and metadata headers."""
    result = await query.download(key, bucket=bucket)
    stored = result.object
    # stored Content-Type verbatim, no charset suffix
    return Response(content=stored.body, headers=object_headers(stored.info))


@router.delete(
    "/files/{key:path}",
    response_model=DeleteResponse,
    responses={400: {"model": ErrorResponse, "description": "File name is required"}},
)
async def delete_file(
    key: str,
    deletes: Annotated[FileDeleteService, Depends(get_delete_service)],
    bucket: Annotated[str | None, Query()] = None,
) -> DeleteResponse:
    """Delete the object; deleting a missing key also succeeds."""
    result = await deletes.delete(key, bucket=bucket)
    return DeleteResponse(file_name=result.key, bucket=result.bucket)
