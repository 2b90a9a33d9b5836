"""Stored object entities.

Pure value types returned by storage backends; no backend or HTTP concerns.
"""

from dataclasses import dataclass, field
from datetime import datetime

from filedrop.shared.utils.files import DEFAULT_CONTENT_TYPE


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata of one stored object (what a HEAD or a listing returns)."""

    key: str
    size: int
    uploaded: datetime
    etag: str
    content_type: str = DEFAULT_CONTENT_TYPE
    custom_metadata: dict[str, str] = field(default_factory=dict)

    @property
    def is_folder_marker(self) -> bool:
        """Zero-byte ``name/`` objects some clients create to represent folders."""
        return self.key.endswith("/")

    @property
    def http_etag(self) -> str:
        """ETag as sent in HTTP headers (double-quoted)."""
        return self.etag if self.etag.startswith('"') else f'"{self.etag}"'


@dataclass(frozen=True)
class StoredObject:
    """An object's metadata together with its full body."""

    info: ObjectInfo
    body: bytes


@dataclass(frozen=True)
class ListPage:
    """One page of a prefix listing.

    ``common_prefixes`` holds the folder names rolled up by the delimiter,
    each ending with the delimiter. ``cursor`` is set only when ``truncated``.
    """

    objects: list[ObjectInfo] = field(default_factory=list)
    common_prefixes: list[str] = field(default_factory=list)
    truncated: bool = False
    cursor: str | None = None
