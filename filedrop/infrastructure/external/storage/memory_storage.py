"""In-process storage backend (development and tests)."""

from __future__ import annotations

import hashlib

from filedrop.domain.entities import ListPage, ObjectInfo, StoredObject
from filedrop.infrastructure.external.storage.listing import paginate_keys
from filedrop.shared.utils.datetime import utc_now


class MemoryStorageService:
    """Dict-backed object store. Contents live as long as the instance.

    A put replaces the whole entry in one assignment, so readers never see
    a partially written object.
    """

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self._objects: dict[str, StoredObject] = {}

    def __len__(self) -> int:
        return len(self._objects)

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        custom_metadata: dict[str, str] | None = None,
    ) -> ObjectInfo:
        body = bytes(data)
        info = ObjectInfo(
            key=key,
            size=len(body),
            uploaded=utc_now(),
            etag=hashlib.md5(body, usedforsecurity=False).hexdigest(),
            content_type=content_type,
            custom_metadata=dict(custom_metadata or {}),
        )
        self._objects[key] = StoredObject(info=info, body=body)
        return info

    async def get(self, key: str) -> StoredObject | None:
        return self._objects.get(key)

    async def delete(self, key: str) -> None:
        self._objects.pop(key, None)

    async def list(
        self,
        prefix: str = "",
        delimiter: str = "/",
        limit: int = 1000,
        cursor: str | None = None,
    ) -> ListPage:
        page = paginate_keys(list(self._objects), prefix, delimiter, limit, cursor)
        return ListPage(
            objects=[self._objects[k].info for k in page.keys if k in self._objects],
            common_prefixes=page.common_prefixes,
            truncated=page.truncated,
            cursor=page.cursor,
        )
