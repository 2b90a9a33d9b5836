"""Async HTTP client for the filedrop API."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

import httpx

from filedrop.client.progress import ProgressSnapshot, UploadProgress

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 64 * 1024
DEFAULT_TIMEOUT = 300.0
METADATA_HEADER_PREFIX = "x-metadata-"


class FileDropClientError(Exception):
    """Non-2xx response from the API; ``message`` is the body's ``error`` field."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


@dataclass(frozen=True)
class BatchUploadResult:
    """Outcome of a folder upload: counts plus one ``{name, error}`` per failure."""

    total_files: int
    uploaded_files: int
    errors: list[dict[str, str]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class DownloadedFile:
    key: str
    content: bytes
    content_type: str
    etag: str | None
    metadata: dict[str, str]


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Server responded with {response.status_code}"


async def _iter_chunks(
    body: bytes, progress: UploadProgress | None
) -> AsyncIterator[bytes]:
    for offset in range(0, len(body), UPLOAD_CHUNK_SIZE):
        chunk = body[offset : offset + UPLOAD_CHUNK_SIZE]
        yield chunk
        if progress is not None:
            progress.advance(len(chunk))


def folder_files(root: Path) -> list[tuple[Path, str]]:
    """Files under ``root`` in sorted order, each with its upload name.

    The upload name is the path relative to ``root``'s parent, so it starts
    with the folder's own name (``photos/2024/a.png``).
    """
    root = root.resolve()
    base = root.parent
    return [
        (path, path.relative_to(base).as_posix())
        for path in sorted(root.rglob("*"))
        if path.is_file()
    ]


class FileDropClient:
    """Authenticated client for upload, download, delete, list and bucket calls.

    Use as an async context manager, or call ``aclose`` when done. Pass
    ``transport`` (e.g. ``httpx.ASGITransport``) to talk to an in-process app.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> FileDropClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = await self._http.request(method, url, **kwargs)
        if response.is_success:
            return response
        raise FileDropClientError(response.status_code, _error_message(response))

    @staticmethod
    def _file_url(key: str) -> str:
        return "/files/" + quote(key, safe="/")

    async def upload_file(
        self,
        source: str | Path | bytes,
        *,
        file_name: str | None = None,
        upload_name: str | None = None,
        content_type: str | None = None,
        bucket: str | None = None,
        metadata: dict[str, str] | None = None,
        on_progress: Callable[[ProgressSnapshot], None] | None = None,
    ) -> dict[str, Any]:
        """Upload one file and return the API's JSON body.

        Args:
            source: Path to read, or raw bytes.
            file_name: Sent as the ``fileName`` form field (may contain ``/``).
            upload_name: Filename of the multipart part; defaults to the path's name.
            content_type: MIME type of the part; the server guesses when omitted.
            bucket: Target bucket; the server falls back to its default.
            metadata: Extra form fields stored as custom metadata.
            on_progress: Called with throttled progress snapshots.

        Raises:
            FileDropClientError: The API rejected the upload.
        """
        if isinstance(source, bytes):
            data = source
            part_name = upload_name or file_name or "blob"
        else:
            path = Path(source)
            data = path.read_bytes()
            part_name = upload_name or path.name
        part_name = part_name.rpartition("/")[2] or part_name

        fields: dict[str, str] = dict(metadata or {})
        if file_name:
            fields["fileName"] = file_name
        if bucket:
            fields["bucket"] = bucket
        part = (part_name, data, content_type) if content_type else (part_name, data)

        # Encode once so the body can be streamed in chunks with progress.
        encoded = self._http.build_request(
            "POST", "/upload", data=fields, files={"file": part}
        )
        body = encoded.read()
        progress = UploadProgress(len(body), on_progress) if on_progress else None
        response = await self._request(
            "POST",
            "/upload",
            content=_iter_chunks(body, progress),
            headers={
                "Content-Type": encoded.headers["Content-Type"],
                "Content-Length": str(len(body)),
            },
        )
        if progress is not None:
            progress.finish()
        return response.json()

    async def upload_folder(
        self,
        root: str | Path,
        *,
        bucket: str | None = None,
        on_file_done: Callable[[int, int], None] | None = None,
    ) -> BatchUploadResult:
        """Upload every file under ``root``, one at a time.

        A failed file is recorded and the batch continues. ``on_file_done``
        receives ``(uploaded_so_far, total)`` after each success.
        """
        files = folder_files(Path(root))
        total = len(files)
        uploaded = 0
        errors: list[dict[str, str]] = []
        for path, name in files:
            try:
                await self.upload_file(path, file_name=name, bucket=bucket)
            except FileDropClientError as e:
                logger.warning("Upload of %s failed: %s", name, e.message)
                errors.append({"name": name, "error": e.message})
                continue
            except (httpx.HTTPError, OSError) as e:
                logger.warning("Upload of %s failed: %s", name, e)
                errors.append({"name": name, "error": str(e) or type(e).__name__})
                continue
            uploaded += 1
            if on_file_done is not None:
                on_file_done(uploaded, total)
        return BatchUploadResult(total_files=total, uploaded_files=uploaded, errors=errors)

    async def list_files(
        self,
        prefix: str = "",
        *,
        bucket: str | None = None,
        delimiter: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """Return one listing page (``files``, ``truncated``, ``cursor``...)."""
        params: dict[str, Any] = {}
        if prefix:
            params["prefix"] = prefix
        if bucket:
            params["bucket"] = bucket
        if delimiter:
            params["delimiter"] = delimiter
        if limit is not None:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor
        response = await self._request("GET", "/list", params=params)
        return response.json()

    async def download(self, key: str, *, bucket: str | None = None) -> DownloadedFile:
        params = {"bucket": bucket} if bucket else None
        response = await self._request("GET", self._file_url(key), params=params)
        metadata = {
            unquote(name[len(METADATA_HEADER_PREFIX) :]): unquote(value)
            for name, value in response.headers.items()
            if name.lower().startswith(METADATA_HEADER_PREFIX)
        }
        return DownloadedFile(
            key=key,
            content=response.content,
            content_type=response.headers.get("content-type", "application/octet-stream"),
            etag=response.headers.get("etag"),
            metadata=metadata,
        )

    async def delete(self, key: str, *, bucket: str | None = None) -> dict[str, Any]:
        params = {"bucket": bucket} if bucket else None
        response = await self._request("DELETE", self._file_url(key), params=params)
        return response.json()

    async def list_buckets(self) -> dict[str, Any]:
        response = await self._request("GET", "/buckets")
        return response.json()
