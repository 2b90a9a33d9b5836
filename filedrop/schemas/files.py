"""File API schemas: upload, delete and listing bodies."""

from datetime import datetime

from pydantic import ConfigDict, Field, field_serializer

from filedrop.application.dtos.files import ListEntry, ListResult
from filedrop.schemas.common import CamelModel
from filedrop.shared.utils.datetime import to_iso_z


class UploadResponse(CamelModel):
    """Response for POST /upload."""

    success: bool = True
    file_name: str
    size: int
    content_type: str
    bucket: str
    url: str
    is_from_folder_upload: bool = False


class DeleteResponse(CamelModel):
    """Response for DELETE /files/{key}."""

    success: bool = True
    file_name: str
    bucket: str
    message: str = "File deleted successfully"


class HttpMetadata(CamelModel):
    content_type: str


class FileEntry(CamelModel):
    """A stored object in a listing."""

    name: str
    size: int
    uploaded: datetime
    etag: str
    bucket: str
    is_folder: bool = False
    http_metadata: HttpMetadata
    custom_metadata: dict[str, str] = Field(default_factory=dict)

    @field_serializer("uploaded")
    def _serialize_uploaded(self, value: datetime) -> str:
        return to_iso_z(value)


class FolderEntry(CamelModel):
    """A common prefix (folder) in a listing."""

    model_config = ConfigDict(extra="forbid")

    name: str
    is_folder: bool = True
    bucket: str
    size: int = 0


class ListResponse(CamelModel):
    """Response for GET /list."""

    files: list[FileEntry | FolderEntry]
    current_prefix: str
    bucket: str
    truncated: bool
    cursor: str | None = None

    @classmethod
    def from_result(cls, result: ListResult) -> "ListResponse":
        return cls(
            files=[_entry(e) for e in result.entries],
            current_prefix=result.prefix,
            bucket=result.bucket,
            truncated=result.truncated,
            cursor=result.cursor,
        )


def _entry(entry: ListEntry) -> FileEntry | FolderEntry:
    info = entry.info
    if info is None:
        return FolderEntry(name=entry.name, bucket=entry.bucket)
    return FileEntry(
        name=info.key,
        size=info.size,
        uploaded=info.uploaded,
        etag=info.etag,
        bucket=entry.bucket,
        is_folder=entry.is_folder,
        http_metadata=HttpMetadata(content_type=info.content_type),
        custom_metadata=info.custom_metadata,
    )
