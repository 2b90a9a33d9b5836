"""FileDropClient tests against the in-process app."""

from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI

from filedrop.client import FileDropClient, FileDropClientError, ProgressSnapshot
from filedrop.client.http import folder_files
from filedrop.infrastructure.external.storage.memory_storage import MemoryStorageService
from filedrop.infrastructure.external.storage.registry import BucketRegistry
from filedrop.main import create_app

TOKEN = "client-token"


class PickyStorage(MemoryStorageService):
    """Memory bucket that refuses keys ending in .bad."""

    async def put(self, key, data, content_type, custom_metadata=None):
        if key.endswith(".bad"):
            raise RuntimeError("rejected")
        return await super().put(key, data, content_type, custom_metadata)


@pytest.fixture
def secured_app(make_settings) -> FastAPI:
    registry = BucketRegistry(
        [("FILES", PickyStorage("FILES")), ("ARCHIVE", MemoryStorageService("ARCHIVE"))]
    )
    return create_app(make_settings(api_token=TOKEN), registry=registry)


@pytest.fixture
async def api(secured_app: FastAPI):
    async with FileDropClient(
        "http://test", TOKEN, transport=httpx.ASGITransport(app=secured_app)
    ) as client:
        yield client


async def test_upload_bytes_and_download(api: FileDropClient) -> None:
    result = await api.upload_file(
        b"hello", file_name="greetings/hello.txt", content_type="text/plain", metadata={"lang": "en"}
    )
    assert result["fileName"] == "greetings/hello.txt"
    assert result["isFromFolderUpload"] is True

    downloaded = await api.download("greetings/hello.txt")
    assert downloaded.content == b"hello"
    assert downloaded.content_type == "text/plain"
    assert downloaded.etag
    assert downloaded.metadata["lang"] == "en"
    assert downloaded.metadata["filesize"] == "5"


async def test_upload_path_reports_progress(api: FileDropClient, tmp_path: Path) -> None:
    source = tmp_path / "big.bin"
    source.write_bytes(b"z" * (300 * 1024))
    snapshots: list[ProgressSnapshot] = []
    result = await api.upload_file(source, on_progress=snapshots.append)
    assert result["fileName"] == "big.bin"
    assert result["size"] == 300 * 1024
    assert snapshots
    assert snapshots[-1].percent == 100.0


async def test_non_ascii_metadata_roundtrip(api: FileDropClient) -> None:
    await api.upload_file(b"x", file_name="a.txt", metadata={"author": "Zoë"})
    downloaded = await api.download("a.txt")
    assert downloaded.metadata["author"] == "Zoë"


async def test_metadata_names_with_spaces_are_decoded(api: FileDropClient) -> None:
    await api.upload_file(b"x", file_name="a.txt", metadata={"my field": "v 1"})
    downloaded = await api.download("a.txt")
    assert downloaded.metadata["my field"] == "v 1"
    assert "my%20field" not in downloaded.metadata


async def test_list_delete_and_buckets(api: FileDropClient) -> None:
    await api.upload_file(b"1", file_name="docs/a.txt")
    await api.upload_file(b"2", file_name="b.txt", bucket="ARCHIVE")

    root = await api.list_files()
    assert [e["name"] for e in root["files"]] == ["docs/"]
    archive = await api.list_files(bucket="ARCHIVE")
    assert [e["name"] for e in archive["files"]] == ["b.txt"]

    buckets = await api.list_buckets()
    assert buckets["buckets"] == ["FILES", "ARCHIVE"]

    deleted = await api.delete("docs/a.txt")
    assert deleted["success"] is True
    with pytest.raises(FileDropClientError) as exc_info:
        await api.download("docs/a.txt")
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "File not found"


async def test_list_paging_parameters(api: FileDropClient) -> None:
    for i in range(3):
        await api.upload_file(b"x", file_name=f"f{i}.txt")
    first = await api.list_files(limit=2)
    assert first["truncated"] is True
    second = await api.list_files(limit=2, cursor=first["cursor"])
    assert [e["name"] for e in second["files"]] == ["f2.txt"]


async def test_wrong_token_raises_401(secured_app: FastAPI) -> None:
    async with FileDropClient(
        "http://test", "wrong", transport=httpx.ASGITransport(app=secured_app)
    ) as client:
        with pytest.raises(FileDropClientError) as exc_info:
            await client.list_buckets()
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Authentication required"


def test_folder_files_are_sorted_and_named_from_folder(tmp_path: Path) -> None:
    root = tmp_path / "photos"
    (root / "2024").mkdir(parents=True)
    (root / "a.txt").write_text("a")
    (root / "2024" / "b.png").write_bytes(b"b")
    assert [name for _, name in folder_files(root)] == ["photos/2024/b.png", "photos/a.txt"]


async def test_upload_folder_is_sequential_and_collects_failures(
    api: FileDropClient, tmp_path: Path
) -> None:
    """A failed file is recorded with its relative path and the batch goes on."""
    root = tmp_path / "batch"
    (root / "sub").mkdir(parents=True)
    (root / "1.txt").write_text("one")
    (root / "2.bad").write_text("two")
    (root / "sub" / "3.txt").write_text("three")
    progress: list[tuple[int, int]] = []

    result = await api.upload_folder(root, on_file_done=lambda done, total: progress.append((done, total)))

    assert result.total_files == 3
    assert result.uploaded_files == 2
    assert result.success is False
    assert result.errors == [{"name": "batch/2.bad", "error": "Upload failed: rejected"}]
    assert progress == [(1, 3), (2, 3)]

    listing = await api.list_files("batch/")
    assert [e["name"] for e in listing["files"]] == ["batch/sub/", "batch/1.txt"]
    downloaded = await api.download("batch/sub/3.txt")
    assert downloaded.content == b"three"


async def test_upload_folder_empty(api: FileDropClient, tmp_path: Path) -> None:
    result = await api.upload_folder(tmp_path)
    assert result.total_files == 0
    assert result.success is True
