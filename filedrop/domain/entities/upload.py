"""Upload metadata entity."""

from dataclasses import dataclass, field
from datetime import datetime

from filedrop.shared.utils.datetime import to_iso_z

RESERVED_METADATA_KEYS = frozenset({"uploadedAt", "fileSize", "bucket"})


@dataclass(frozen=True)
class UploadMetadata:
    """Typed metadata recorded with every upload.

    ``extra`` holds the caller's own form fields. Fixed fields win over
    extra fields of the same name.
    """

    uploaded_at: datetime
    file_size: int
    bucket: str
    extra: dict[str, str] = field(default_factory=dict)

    def to_custom_metadata(self) -> dict[str, str]:
        """Flatten into the string map stored with the object."""
        metadata = {
            k: v for k, v in self.extra.items() if k not in RESERVED_METADATA_KEYS
        }
        metadata["uploadedAt"] = to_iso_z(self.uploaded_at)
        metadata["fileSize"] = str(self.file_size)
        metadata["bucket"] = self.bucket
        return metadata
