"""filedrop command group.

    filedrop [--url URL] [--token TOKEN] buckets
    filedrop ls [PREFIX] [--bucket B] [--limit N] [--cursor C]
    filedrop upload PATH [--name KEY] [--bucket B] [--meta k=v ...]
    filedrop upload-dir DIR [--bucket B]
    filedrop get KEY [-o OUT] [--bucket B]
    filedrop rm KEY [--bucket B]

URL and token default to FILEDROP_URL and FILEDROP_TOKEN.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import click
import httpx

from filedrop import __version__
from filedrop.cli.utils import coro, error, status, success
from filedrop.client import (
    FileDropClient,
    FileDropClientError,
    ProgressSnapshot,
    folder_display_name,
    format_bytes,
)

DEFAULT_URL = "http://localhost:8000"


def _parse_meta(
    ctx: click.Context, param: click.Parameter, pairs: tuple[str, ...]
) -> dict[str, str]:
    meta: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"metadata must be key=value, got {pair!r}")
        meta[key] = value
    return meta


@asynccontextmanager
async def _session(ctx: click.Context) -> AsyncIterator[FileDropClient]:
    """Open a client for the group's URL and token; API and network errors exit 1."""
    url = ctx.obj["url"]
    try:
        async with FileDropClient(url, ctx.obj["token"]) as client:
            yield client
    except FileDropClientError as e:
        error(f"Error ({e.status_code}): {e.message}")
        ctx.exit(1)
    except httpx.HTTPError as e:
        error(f"Could not reach {url}: {e}")
        ctx.exit(1)


def _print_progress(snapshot: ProgressSnapshot) -> None:
    status(snapshot.describe())


def _print_listing(page: dict[str, Any]) -> None:
    for entry in page.get("files", []):
        if entry.get("isFolder") and "uploaded" not in entry:
            click.echo(f"{'DIR':>12}  {folder_display_name(entry['name'])}/")
        else:
            click.echo(f"{format_bytes(entry.get('size', 0)):>12}  {entry['name']}")
    if page.get("truncated"):
        click.echo(f"-- more: --cursor {page.get('cursor')}")


@click.group()
@click.version_option(version=__version__, prog_name="filedrop")
@click.option(
    "--url", envvar="FILEDROP_URL", default=DEFAULT_URL, show_default=True, help="Server base URL."
)
@click.option("--token", envvar="FILEDROP_TOKEN", default=None, help="Bearer token.")
@click.pass_context
def cli(ctx: click.Context, url: str, token: str | None) -> None:
    """Upload, list, download and delete files on a filedrop server."""
    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["token"] = token


@cli.command()
@click.pass_context
@coro
async def buckets(ctx: click.Context) -> None:
    """List buckets; the default one is marked."""
    async with _session(ctx) as client:
        result = await client.list_buckets()
    for name in result["buckets"]:
        marker = " (default)" if name == result.get("default") else ""
        click.echo(f"{name}{marker}")


@cli.command(name="ls")
@click.argument("prefix", default="")
@click.option("--bucket", help="Bucket name (default bucket if omitted).")
@click.option("--limit", type=click.IntRange(min=1), help="Entries per page.")
@click.option("--cursor", help="Cursor printed by the previous page.")
@click.pass_context
@coro
async def list_files(
    ctx: click.Context, prefix: str, bucket: str | None, limit: int | None, cursor: str | None
) -> None:
    """List one folder level under PREFIX."""
    async with _session(ctx) as client:
        page = await client.list_files(prefix, bucket=bucket, limit=limit, cursor=cursor)
    _print_listing(page)


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", help="Object key (may contain '/').")
@click.option("--bucket", help="Bucket name (default bucket if omitted).")
@click.option(
    "--meta",
    multiple=True,
    metavar="KEY=VALUE",
    callback=_parse_meta,
    help="Custom metadata; repeat for several entries.",
)
@click.pass_context
@coro
async def upload(
    ctx: click.Context,
    path: Path,
    name: str | None,
    bucket: str | None,
    meta: dict[str, str],
) -> None:
    """Upload one file and print the server's summary."""
    async with _session(ctx) as client:
        result = await client.upload_file(
            path, file_name=name, bucket=bucket, metadata=meta, on_progress=_print_progress
        )
    click.echo(err=True)
    click.echo(json.dumps(result, indent=2))


@cli.command(name="upload-dir")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--bucket", help="Bucket name (default bucket if omitted).")
@click.pass_context
@coro
async def upload_dir(ctx: click.Context, path: Path, bucket: str | None) -> None:
    """Upload a folder, one file at a time; exits 1 if any file failed."""
    async with _session(ctx) as client:
        batch = await client.upload_folder(
            path,
            bucket=bucket,
            on_file_done=lambda done, total: status(f"Uploading files ({done}/{total})"),
        )
    click.echo(err=True)
    click.echo(f"Uploaded {batch.uploaded_files}/{batch.total_files} files")
    for failure in batch.errors:
        error(f"failed: {failure['name']}: {failure['error']}")
    if not batch.success:
        ctx.exit(1)


@cli.command()
@click.argument("key")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--bucket", help="Bucket name (default bucket if omitted).")
@click.pass_context
@coro
async def get(ctx: click.Context, key: str, output: Path | None, bucket: str | None) -> None:
    """Download KEY to OUTPUT, or to stdout."""
    async with _session(ctx) as client:
        downloaded = await client.download(key, bucket=bucket)
    if output:
        output.write_bytes(downloaded.content)
        success(f"Saved {format_bytes(len(downloaded.content))} to {output}")
    else:
        click.get_binary_stream("stdout").write(downloaded.content)


@cli.command(name="rm")
@click.argument("key")
@click.option("--bucket", help="Bucket name (default bucket if omitted).")
@click.pass_context
@coro
async def remove(ctx: click.Context, key: str, bucket: str | None) -> None:
    """Delete KEY; deleting a missing key succeeds."""
    async with _session(ctx) as client:
        result = await client.delete(key, bucket=bucket)
    success(result.get("message", "File deleted successfully"))


def main() -> None:
    """Entry point for the ``filedrop`` script."""
    cli(obj={})


if __name__ == "__main__":
    main()
