"""File use cases: upload (write), query (read) and delete."""

from filedrop.application.use_cases.files.file_operations import (
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
    FileDeleteService,
    FileQueryService,
    FileUploadService,
    normalize_limit,
)

__all__ = [
    "DEFAULT_LIST_LIMIT",
    "MAX_LIST_LIMIT",
    "FileDeleteService",
    "FileQueryService",
    "FileUploadService",
    "normalize_limit",
]
