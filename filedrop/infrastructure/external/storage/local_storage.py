"""Local filesystem storage: one self-describing file per object, atomic writes."""

from __future__ import annotations

import asyncio
import hashlib
import json
import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os

from filedrop.domain.entities import ListPage, ObjectInfo, StoredObject
from filedrop.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageListError,
    StorageUploadError,
)
from filedrop.infrastructure.external.storage.listing import paginate_keys
from filedrop.shared.telemetry.logging import get_logger
from filedrop.shared.utils.datetime import parse_iso, utc_now
from filedrop.shared.utils.files import DEFAULT_CONTENT_TYPE

logger = get_logger(__name__)

OBJECT_SUFFIX = ".obj"
TEMP_PREFIX = ".tmp_"


class CorruptObjectError(ValueError):
    """Object file has no readable header line."""


def _header_bytes(info: ObjectInfo) -> bytes:
    # json.dumps escapes control characters, so the header is a single line
    header = {
        "key": info.key,
        "etag": info.etag,
        "size": info.size,
        "content_type": info.content_type,
        "uploaded": info.uploaded.isoformat(),
        "custom": info.custom_metadata,
    }
    return json.dumps(header, ensure_ascii=True).encode("ascii") + b"\n"


def _info_from_header(line: bytes) -> ObjectInfo:
    try:
        header = json.loads(line)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorruptObjectError(str(e)) from e
    if not isinstance(header, dict) or not isinstance(header.get("key"), str):
        raise CorruptObjectError("header is not an object record")
    uploaded = header.get("uploaded")
    return ObjectInfo(
        key=header["key"],
        size=int(header.get("size") or 0),
        uploaded=parse_iso(uploaded) if uploaded else utc_now(),
        etag=header.get("etag") or "",
        content_type=header.get("content_type") or DEFAULT_CONTENT_TYPE,
        custom_metadata={str(k): str(v) for k, v in (header.get("custom") or {}).items()},
    )


class LocalStorageService:
    """One bucket as a directory of object files.

    Keys are opaque: ``a/../b.txt``, ``a`` and ``a/b.txt`` are three
    different objects. Each key maps to ``<root>/<xx>/<sha256(key)>.obj``,
    a file holding a one-line JSON header (key, ETag, content type, custom
    metadata) followed by the body. A write goes to a temp file in the same
    directory and is renamed into place, so header and body are always
    replaced together and a reader sees one whole object.
    """

    def __init__(self, storage_root: str | Path) -> None:
        """Initialize local storage.

        Args:
            storage_root: Directory holding this bucket's objects (created if missing).
        """
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _object_path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.storage_root / digest[:2] / f"{digest}{OBJECT_SUFFIX}"

    async def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        custom_metadata: dict[str, str] | None = None,
    ) -> ObjectInfo:
        """Write header and body as one file; replaces any existing object."""
        info = ObjectInfo(
            key=key,
            size=len(data),
            uploaded=utc_now(),
            etag=hashlib.md5(data, usedforsecurity=False).hexdigest(),
            content_type=content_type,
            custom_metadata=dict(custom_metadata or {}),
        )
        target_path = self._object_path(key)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            fd, temp_path = tempfile.mkstemp(dir=target_path.parent, prefix=TEMP_PREFIX)
            os.close(fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(_header_bytes(info))
                    await f.write(data)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
        except OSError as e:
            raise StorageUploadError(key, str(e)) from e
        logger.info("Stored %s (%d bytes) in %s", key, info.size, self.storage_root)
        return info

    async def get(self, key: str) -> StoredObject | None:
        file_path = self._object_path(key)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                content = await f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageDownloadError(key, str(e)) from e
        header, sep, body = content.partition(b"\n")
        try:
            if not sep:
                raise CorruptObjectError("missing header line")
            info = _info_from_header(header)
        except CorruptObjectError as e:
            raise StorageDownloadError(key, f"unreadable object file: {e}") from e
        logger.debug("Read %s from %s", key, self.storage_root)
        return StoredObject(info=info, body=body)

    async def delete(self, key: str) -> None:
        """Delete the object file; missing keys are a no-op."""
        file_path = self._object_path(key)
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageDeleteError(key, str(e)) from e
        logger.info("Deleted %s from %s", key, self.storage_root)

    def _scan_objects(self, prefix: str) -> dict[str, ObjectInfo]:
        """Read the header of every object file and keep those under ``prefix``."""
        found: dict[str, ObjectInfo] = {}
        for path in self.storage_root.glob(f"*/*{OBJECT_SUFFIX}"):
            try:
                with open(path, "rb") as f:
                    info = _info_from_header(f.readline())
            except FileNotFoundError:
                # deleted while scanning
                continue
            except CorruptObjectError:
                logger.warning("Skipping unreadable object file %s", path)
                continue
            if info.key.startswith(prefix):
                found[info.key] = info
        return found

    async def list(
        self,
        prefix: str = "",
        delimiter: str = "/",
        limit: int = 1000,
        cursor: str | None = None,
    ) -> ListPage:
        try:
            found = await asyncio.to_thread(self._scan_objects, prefix)
        except OSError as e:
            raise StorageListError(prefix, str(e)) from e
        page = paginate_keys(found, prefix, delimiter, limit, cursor)
        return ListPage(
            objects=[found[key] for key in page.keys],
            common_prefixes=page.common_prefixes,
            truncated=page.truncated,
            cursor=page.cursor,
        )
