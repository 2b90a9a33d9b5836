"""Shared utilities: datetime, generators, file names."""

from filedrop.shared.utils.datetime import (
    ensure_utc,
    parse_iso,
    to_iso_z,
    utc_now,
)
from filedrop.shared.utils.files import (
    DEFAULT_CONTENT_TYPE,
    build_storage_key,
    content_type_for,
    get_file_extension,
    sanitize_file_name,
    split_key,
)
from filedrop.shared.utils.generators import generate_cuid

__all__ = [
    "DEFAULT_CONTENT_TYPE",
    "build_storage_key",
    "content_type_for",
    "ensure_utc",
    "generate_cuid",
    "get_file_extension",
    "parse_iso",
    "sanitize_file_name",
    "split_key",
    "to_iso_z",
    "utc_now",
]
