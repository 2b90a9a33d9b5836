"""Upload endpoint: multipart form to stored object."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from filedrop.api.dependencies import get_upload_service
from filedrop.application.dtos.files import UploadCommand
from filedrop.application.use_cases.files import FileUploadService
from filedrop.domain.exceptions import ValidationException
from filedrop.schemas.common import ErrorResponse
from filedrop.schemas.files import UploadResponse

router = APIRouter()

FILE_FIELD = "file"
FILE_NAME_FIELD = "fileName"
BUCKET_FIELD = "bucket"
_FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _extra_fields(form: FormData) -> dict[str, str]:
    """String form fields other than the file and its name, last value winning."""
    return {
        key: value
        for key, value in form.multi_items()
        if key not in (FILE_FIELD, FILE_NAME_FIELD) and isinstance(value, str)
    }


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Bad form or missing file"},
        413: {"model": ErrorResponse, "description": "Declared size over the limit"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def upload_file(
    request: Request,
    uploads: Annotated[FileUploadService, Depends(get_upload_service)],
) -> UploadResponse:
    """Store the ``file`` part under ``fileName`` (or its own filename).

    Every other string field is kept as custom metadata on the object.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith(_FORM_CONTENT_TYPES):
        raise ValidationException(
            f"Failed to parse form data: unsupported content type '{content_type}'"
        )
    try:
        form = await request.form()
    except (MultiPartException, StarletteHTTPException) as e:
        reason = getattr(e, "message", None) or getattr(e, "detail", None) or str(e)
        raise ValidationException(f"Failed to parse form data: {reason}") from e

    try:
        upload = form.get(FILE_FIELD)
        if not isinstance(upload, UploadFile):
            raise ValidationException("No file or invalid file provided", field=FILE_FIELD)

        requested_name = form.get(FILE_NAME_FIELD)
        if not isinstance(requested_name, str) or not requested_name:
            requested_name = upload.filename or ""
        bucket = form.get(BUCKET_FIELD)

        command = UploadCommand(
            requested_name=requested_name,
            original_file_name=upload.filename,
            data=await upload.read(),
            declared_content_type=upload.content_type or None,
            bucket=bucket if isinstance(bucket, str) else None,
            extra_fields=_extra_fields(form),
            from_folder_upload=FILE_NAME_FIELD in form,
        )
    finally:
        await form.close()

    result = await uploads.upload(command)
    return UploadResponse(
        file_name=result.key,
        size=result.size,
        content_type=result.content_type,
        bucket=result.bucket,
        url=result.url,
        is_from_folder_upload=result.from_folder_upload,
    )
