"""DTOs for file use cases (no dependency on HTTP or storage SDKs)."""

from dataclasses import dataclass, field

from filedrop.domain.entities import ObjectInfo, StoredObject


@dataclass(frozen=True)
class UploadCommand:
    """Input for one upload, as read from the multipart form."""

    requested_name: str
    original_file_name: str | None
    data: bytes
    declared_content_type: str | None = None
    bucket: str | None = None
    extra_fields: dict[str, str] = field(default_factory=dict)
    from_folder_upload: bool = False


@dataclass(frozen=True)
class UploadResult:
    key: str
    size: int
    content_type: str
    bucket: str
    from_folder_upload: bool

    @property
    def url(self) -> str:
        return f"/files/{self.key}"


@dataclass(frozen=True)
class DownloadResult:
    bucket: str
    object: StoredObject


@dataclass(frozen=True)
class DeleteResult:
    key: str
    bucket: str


@dataclass(frozen=True)
class ListEntry:
    """One row of a listing: an object (``info`` set) or a common prefix."""

    name: str
    is_folder: bool
    bucket: str
    size: int = 0
    info: ObjectInfo | None = None


@dataclass(frozen=True)
class ListResult:
    bucket: str
    prefix: str
    entries: list[ListEntry]
    truncated: bool
    cursor: str | None


@dataclass(frozen=True)
class BucketsResult:
    names: list[str]
    default: str | None
