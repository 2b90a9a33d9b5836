"""Application DTOs."""

from filedrop.application.dtos.files import (
    BucketsResult,
    DeleteResult,
    DownloadResult,
    ListEntry,
    ListResult,
    UploadCommand,
    UploadResult,
)

__all__ = [
    "BucketsResult",
    "DeleteResult",
    "DownloadResult",
    "ListEntry",
    "ListResult",
    "UploadCommand",
    "UploadResult",
]
