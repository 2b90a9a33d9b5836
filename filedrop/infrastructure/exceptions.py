"""Infrastructure exceptions for storage operations.

Storage errors extend FileDropException so presentation can map them
to HTTP responses consistently. Each keeps the backend's own reason in
``reason`` (and ``details``); whether that reason reaches the API caller
is decided by the exception handler.
"""

from filedrop.domain.exceptions import FileDropException


class StorageException(FileDropException):
    """Base exception for storage operations.

    Attributes:
        operation: Caller-facing operation label (e.g. 'Upload failed').
        reason: Message reported by the backend.
    """

    def __init__(
        self,
        operation: str,
        key: str,
        reason: str,
        error_code: str,
    ) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(
            f"{operation}: {reason}",
            error_code,
            {"key": key, "reason": reason},
        )


class StorageUploadError(StorageException):
    """Object write failed."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__("Upload failed", key, reason, "STORAGE_UPLOAD_ERROR")


class StorageDownloadError(StorageException):
    """Object read failed (other than not-found)."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__("Download failed", key, reason, "STORAGE_DOWNLOAD_ERROR")


class StorageDeleteError(StorageException):
    """Object deletion failed."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__("Delete failed", key, reason, "STORAGE_DELETE_ERROR")


class StorageListError(StorageException):
    """Prefix listing failed."""

    def __init__(self, prefix: str, reason: str) -> None:
        super().__init__("List failed", prefix, reason, "STORAGE_LIST_ERROR")

