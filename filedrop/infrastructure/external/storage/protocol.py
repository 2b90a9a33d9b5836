"""Storage backend protocol (DIP). Implementations: memory, local filesystem, S3."""

from typing import Protocol

from filedrop.domain.entities import ListPage, ObjectInfo, StoredObject


class StorageBackend(Protocol):
    """Key/value object store bound to one bucket.

    Implementations raise Storage*Error subclasses from
    ``filedrop.infrastructure.exceptions`` on backend failure; a missing key
    is never an error (``None`` from get, no-op for delete).
    """

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        custom_metadata: dict[str, str] | None = None,
    ) -> ObjectInfo:
        """Store ``data`` under ``key``, replacing any existing object."""
        ...

    async def get(self, key: str) -> StoredObject | None:
        """Return the object with its body, or None."""
        ...

    async def delete(self, key: str) -> None:
        """Delete ``key``; missing keys are not an error."""
        ...

    async def list(
        self,
        prefix: str = "",
        delimiter: str = "/",
        limit: int = 1000,
        cursor: str | None = None,
    ) -> ListPage:
        """Return one page of objects under ``prefix``, rolled up by ``delimiter``."""
        ...
