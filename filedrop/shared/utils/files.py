"""File name helpers: sanitization, extension and content-type lookup, key building."""

import re

from filedrop.shared.utils.generators import generate_cuid

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Characters most filesystems reject; '/' is allowed and handled as a folder separator.
_RESERVED_CHARS = re.compile(r'[\\:*?"<>|]')
_EXTENSION = re.compile(r"\.([0-9a-z]+)$", re.IGNORECASE)

CONTENT_TYPES: dict[str, str] = {
    # Documents
    "pdf": "application/pdf",
    "txt": "text/plain",
    "csv": "text/csv",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    # Images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "tiff": "image/tiff",
    "bmp": "image/bmp",
    # Video
    "mp4": "video/mp4",
    # Code
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "xml": "application/xml",
    "cpp": "text/x-c++src",
    "cs": "text/x-csharp",
    "m": "text/x-matlab",
    # Archives
    "zip": "application/zip",
    "gz": "application/gzip",
    "tar": "application/x-tar",
    "rar": "application/vnd.rar",
    "7z": "application/x-7z-compressed",
    "bz2": "application/x-bzip2",
    "xz": "application/x-xz",
    "tgz": "application/gzip",
    "zipx": "application/zip",
    # Model / binary
    "pt": DEFAULT_CONTENT_TYPE,
    "pth": DEFAULT_CONTENT_TYPE,
    "onnx": DEFAULT_CONTENT_TYPE,
    "bin": DEFAULT_CONTENT_TYPE,
    "h5": DEFAULT_CONTENT_TYPE,
    "pb": DEFAULT_CONTENT_TYPE,
    "safetensors": DEFAULT_CONTENT_TYPE,
    "ckpt": DEFAULT_CONTENT_TYPE,
    "mat": DEFAULT_CONTENT_TYPE,
    "gguf": DEFAULT_CONTENT_TYPE,
}


def sanitize_file_name(file_name: str | None) -> str:
    """Replace reserved characters and ``..`` with ``_`` and trim whitespace.

    ``/`` is left alone; callers sanitize the base name only.

    >>> sanitize_file_name(' a<b>..c ')
    'a_b__c'
    """
    if not file_name:
        return ""
    cleaned = _RESERVED_CHARS.sub("_", file_name)
    cleaned = cleaned.replace("..", "_")
    return cleaned.strip()


def get_file_extension(file_name: str | None) -> str:
    """Return the lower-cased trailing alphanumeric extension, or ``''``."""
    if not file_name:
        return ""
    match = _EXTENSION.search(file_name)
    return match.group(1).lower() if match else ""


def content_type_for(file_name: str | None) -> str:
    """Look up a MIME type by extension; unknown extensions map to octet-stream."""
    return CONTENT_TYPES.get(get_file_extension(file_name), DEFAULT_CONTENT_TYPE)


def split_key(key: str) -> tuple[str, str]:
    """Split a key on its last ``/`` into ``(folder_prefix, base_name)``."""
    folder, sep, base = key.rpartition("/")
    if not sep:
        return "", key
    return folder, base


def build_storage_key(requested_name: str, original_file_name: str | None = None) -> str:
    """Build the object key for an upload.

    The folder prefix of ``requested_name`` is kept verbatim; only the base
    name is sanitized. An empty sanitized base name is replaced by a fresh
    CUID plus the extension of ``original_file_name``.

    Args:
        requested_name: ``fileName`` form field, or the upload's own filename.
        original_file_name: Filename the client sent with the file part.

    Returns:
        Object key, e.g. ``photos/2024/a_b.png``.
    """
    folder, sep, base = requested_name.rpartition("/")
    safe_base = sanitize_file_name(base)
    if not safe_base:
        ext = get_file_extension(original_file_name)
        safe_base = generate_cuid() + (f".{ext}" if ext else "")
    return f"{folder}/{safe_base}" if sep else safe_base
