"""Tests for the local filesystem backend (runs in tmp_path)."""

import asyncio
import json
from pathlib import Path

import pytest

from filedrop.infrastructure.exceptions import StorageDownloadError
from filedrop.infrastructure.external.storage.local_storage import (
    OBJECT_SUFFIX,
    LocalStorageService,
)


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorageService:
    return LocalStorageService(tmp_path / "FILES")


def _object_files(storage: LocalStorageService) -> list[Path]:
    return sorted(storage.storage_root.glob(f"*/*{OBJECT_SUFFIX}"))


async def test_put_writes_one_file_with_header_and_body(storage: LocalStorageService) -> None:
    info = await storage.put("docs/a.txt", b"hello", "text/plain", {"author": "ada"})
    (path,) = _object_files(storage)
    header, _, body = path.read_bytes().partition(b"\n")
    assert body == b"hello"
    record = json.loads(header)
    assert record["key"] == "docs/a.txt"
    assert record["etag"] == info.etag
    assert record["content_type"] == "text/plain"
    assert record["custom"] == {"author": "ada"}
    assert not [p for p in path.parent.iterdir() if p.name.startswith(".tmp_")]


async def test_get_returns_body_and_metadata(storage: LocalStorageService) -> None:
    written = await storage.put("a.bin", b"\x00\n\x01", "application/x-thing", {"k": "v\nw"})
    stored = await storage.get("a.bin")
    assert stored is not None
    assert stored.body == b"\x00\n\x01"
    assert stored.info == written


async def test_missing_key_returns_none(storage: LocalStorageService) -> None:
    assert await storage.get("nope.txt") is None


@pytest.mark.parametrize(
    "key",
    [
        "../escape.txt",
        "a/../../escape.txt",
        "../../etc/passwd",
        "/abs/path.txt",
        "folder/",
        "a.meta.json",
        ".tmp_abc",
        "..",
        "",
    ],
)
async def test_any_string_key_round_trips(storage: LocalStorageService, key: str) -> None:
    """Keys are opaque strings; nothing is written outside the bucket directory."""
    await storage.put(key, b"x", "text/plain")
    stored = await storage.get(key)
    assert stored is not None
    assert stored.info.key == key
    assert stored.body == b"x"
    (path,) = _object_files(storage)
    assert path.is_relative_to(storage.storage_root)
    assert [o.key for o in (await storage.list(delimiter="")).objects] == [key]


async def test_dot_segments_do_not_alias(storage: LocalStorageService) -> None:
    await storage.put("y.txt", b"one", "text/plain")
    await storage.put("x/../y.txt", b"two", "text/plain")
    assert (await storage.get("y.txt")).body == b"one"
    assert (await storage.get("x/../y.txt")).body == b"two"
    root = await storage.list()
    assert [o.key for o in root.objects] == ["y.txt"]
    assert root.common_prefixes == ["x/"]


async def test_object_and_folder_of_same_name_coexist(storage: LocalStorageService) -> None:
    await storage.put("a", b"file", "text/plain")
    await storage.put("a/b.txt", b"nested", "text/plain")
    await storage.put("a/", b"", "application/x-directory")
    assert (await storage.get("a")).body == b"file"
    assert (await storage.get("a/b.txt")).body == b"nested"
    assert (await storage.get("a/")).info.content_type == "application/x-directory"
    root = await storage.list()
    assert [o.key for o in root.objects] == ["a"]
    assert root.common_prefixes == ["a/"]


async def test_delete_removes_object_file(storage: LocalStorageService) -> None:
    await storage.put("x/y/z.txt", b"1", "text/plain")
    await storage.delete("x/y/z.txt")
    assert await storage.get("x/y/z.txt") is None
    assert _object_files(storage) == []
    assert storage.storage_root.is_dir()


async def test_delete_missing_key_is_noop(storage: LocalStorageService) -> None:
    await storage.delete("never/there.txt")


async def test_unreadable_object_file_is_download_error(storage: LocalStorageService) -> None:
    await storage.put("bad.txt", b"x", "text/plain")
    (path,) = _object_files(storage)
    path.write_bytes(b"not json\nbody")
    with pytest.raises(StorageDownloadError):
        await storage.get("bad.txt")
    assert (await storage.list()).objects == []


async def test_list_rolls_up_folders(storage: LocalStorageService) -> None:
    for key in ("a/1.txt", "a/2.txt", "a/sub/3.txt", "b.txt"):
        await storage.put(key, key.encode(), "text/plain", {"name": key})
    root = await storage.list()
    assert [o.key for o in root.objects] == ["b.txt"]
    assert root.common_prefixes == ["a/"]

    page = await storage.list(prefix="a/")
    assert [o.key for o in page.objects] == ["a/1.txt", "a/2.txt"]
    assert page.objects[0].custom_metadata == {"name": "a/1.txt"}
    assert page.objects[0].size == len(b"a/1.txt")
    assert page.common_prefixes == ["a/sub/"]


async def test_list_pages_with_cursor(storage: LocalStorageService) -> None:
    for i in range(5):
        await storage.put(f"f{i}.txt", b"x", "text/plain")
    first = await storage.list(limit=3)
    assert [o.key for o in first.objects] == ["f0.txt", "f1.txt", "f2.txt"]
    assert first.truncated is True
    second = await storage.list(limit=3, cursor=first.cursor)
    assert [o.key for o in second.objects] == ["f3.txt", "f4.txt"]
    assert second.truncated is False


async def test_list_missing_prefix_is_empty(storage: LocalStorageService) -> None:
    page = await storage.list(prefix="nothing/here/")
    assert page.objects == []
    assert page.common_prefixes == []


async def test_concurrent_puts_keep_body_and_metadata_together(
    storage: LocalStorageService,
) -> None:
    """Last write wins for the whole object: size, ETag and type match the body."""
    for _ in range(10):
        payloads = [bytes([i]) * (4096 * (i + 1)) for i in range(6)]
        await asyncio.gather(
            *(
                storage.put("race.bin", p, f"application/x-{len(p)}", {"n": str(len(p))})
                for p in payloads
            )
        )
        stored = await storage.get("race.bin")
        assert stored.body in payloads
        assert stored.info.size == len(stored.body)
        assert stored.info.content_type == f"application/x-{len(stored.body)}"
        assert stored.info.custom_metadata == {"n": str(len(stored.body))}
