"""Client library: HTTP client, upload progress, browser state."""

from filedrop.client.formatters import format_bytes, format_time
from filedrop.client.http import (
    BatchUploadResult,
    DownloadedFile,
    FileDropClient,
    FileDropClientError,
)
from filedrop.client.progress import ProgressSnapshot, UploadProgress
from filedrop.client.state import (
    Breadcrumb,
    BrowserState,
    breadcrumbs,
    folder_display_name,
    get_parent_folder,
)

__all__ = [
    "BatchUploadResult",
    "Breadcrumb",
    "BrowserState",
    "DownloadedFile",
    "FileDropClient",
    "FileDropClientError",
    "ProgressSnapshot",
    "UploadProgress",
    "breadcrumbs",
    "folder_display_name",
    "format_bytes",
    "format_time",
    "get_parent_folder",
]
