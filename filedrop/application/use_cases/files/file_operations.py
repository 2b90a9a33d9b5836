"""File operations: upload (write), query (read) and delete, each over the bucket registry."""

from __future__ import annotations

from filedrop.application.dtos.files import (
    BucketsResult,
    DeleteResult,
    DownloadResult,
    ListEntry,
    ListResult,
    UploadCommand,
    UploadResult,
)
from filedrop.domain.entities import UploadMetadata
from filedrop.domain.exceptions import (
    ResourceNotFoundException,
    ValidationException,
)
from filedrop.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageException,
    StorageListError,
    StorageUploadError,
)
from filedrop.infrastructure.external.storage.registry import BucketRegistry
from filedrop.shared.telemetry.logging import get_logger
from filedrop.shared.telemetry.tracing import add_span_attributes, traced
from filedrop.shared.utils.datetime import utc_now
from filedrop.shared.utils.files import build_storage_key, content_type_for

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 100
MAX_LIST_LIMIT = 1000


def normalize_limit(raw: str | int | None) -> int:
    """Parse a page size; invalid or non-positive values fall back to the default."""
    try:
        value = int(str(raw).strip()) if raw is not None else DEFAULT_LIST_LIMIT
    except ValueError:
        return DEFAULT_LIST_LIMIT
    if value <= 0:
        return DEFAULT_LIST_LIMIT
    return min(value, MAX_LIST_LIMIT)


def _require_key(key: str) -> None:
    if not key:
        raise ValidationException("File name is required", field="key")


class FileUploadService:
    """Single responsibility: turn an upload command into a stored object."""

    def __init__(self, registry: BucketRegistry) -> None:
        self.registry = registry

    @traced("files.upload")
    async def upload(self, command: UploadCommand) -> UploadResult:
        """Store one uploaded file.

        The key comes from ``command.requested_name`` with its base name
        sanitized; an unknown bucket name falls back to the default bucket.

        Raises:
            NoBucketsAvailableException: No bucket is bound.
            StorageException: The backend rejected or failed the write.
        """
        bucket_name, backend = self.registry.resolve(command.bucket)
        key = build_storage_key(command.requested_name, command.original_file_name)
        content_type = command.declared_content_type or content_type_for(key)
        metadata = UploadMetadata(
            uploaded_at=utc_now(),
            file_size=len(command.data),
            bucket=bucket_name,
            extra=command.extra_fields,
        )
        add_span_attributes(key=key, bucket=bucket_name, size=len(command.data))
        try:
            info = await backend.put(
                key, command.data, content_type, metadata.to_custom_metadata()
            )
        except StorageException:
            raise
        except Exception as e:
            raise StorageUploadError(key, str(e)) from e
        return UploadResult(
            key=key,
            size=info.size,
            content_type=content_type,
            bucket=bucket_name,
            from_folder_upload=command.from_folder_upload,
        )


class FileQueryService:
    """Single responsibility: downloads, listings and bucket discovery."""

    def __init__(self, registry: BucketRegistry) -> None:
        self.registry = registry

    @traced("files.download")
    async def download(self, key: str, *, bucket: str | None = None) -> DownloadResult:
        """Return the object for ``key``; raise ResourceNotFoundException if missing."""
        _require_key(key)
        bucket_name, backend = self.registry.resolve(bucket)
        try:
            stored = await backend.get(key)
        except StorageException:
            raise
        except Exception as e:
            raise StorageDownloadError(key, str(e)) from e
        if stored is None:
            raise ResourceNotFoundException("File not found", "file", key)
        return DownloadResult(bucket=bucket_name, object=stored)

    @traced("files.list")
    async def list_files(
        self,
        *,
        prefix: str = "",
        delimiter: str = "/",
        limit: int = DEFAULT_LIST_LIMIT,
        cursor: str | None = None,
        bucket: str | None = None,
    ) -> ListResult:
        """List one page under ``prefix``: folders first, then objects, each by name."""
        bucket_name, backend = self.registry.resolve(bucket)
        try:
            page = await backend.list(
                prefix=prefix, delimiter=delimiter, limit=limit, cursor=cursor
            )
        except (StorageException, ValidationException):
            raise
        except Exception as e:
            raise StorageListError(prefix, str(e)) from e

        entries = [
            ListEntry(
                name=info.key,
                is_folder=info.is_folder_marker,
                bucket=bucket_name,
                size=info.size,
                info=info,
            )
            for info in page.objects
        ]
        entries.extend(
            ListEntry(name=p, is_folder=True, bucket=bucket_name)
            for p in page.common_prefixes
        )
        entries.sort(key=lambda e: (not e.is_folder, e.name))
        return ListResult(
            bucket=bucket_name,
            prefix=prefix,
            entries=entries,
            truncated=page.truncated,
            cursor=page.cursor,
        )

    def list_buckets(self) -> BucketsResult:
        """Return bound bucket names in binding order."""
        names = self.registry.names()
        if not names:
            raise ResourceNotFoundException("No buckets available", "bucket", "*")
        return BucketsResult(names=names, default=self.registry.default_name)


class FileDeleteService:
    """Single responsibility: unconditional, idempotent deletes."""

    def __init__(self, registry: BucketRegistry) -> None:
        self.registry = registry

    @traced("files.delete")
    async def delete(self, key: str, *, bucket: str | None = None) -> DeleteResult:
        _require_key(key)
        bucket_name, backend = self.registry.resolve(bucket)
        try:
            await backend.delete(key)
        except StorageException:
            raise
        except Exception as e:
            raise StorageDeleteError(key, str(e)) from e
        logger.info("Delete requested for %s in bucket %s", key, bucket_name)
        return DeleteResult(key=key, bucket=bucket_name)

