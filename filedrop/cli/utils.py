"""CLI helpers: async command runner and colored status lines."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

import click

T = TypeVar("T")


def coro(f: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """Run an async Click command to completion with asyncio.run.

    Usage:
        @cli.command()
        @coro
        async def ls():
            ...
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    """Print an error message in red on stderr."""
    click.secho(f"✗ {message}", fg="red", err=True)


def status(message: str) -> None:
    """Rewrite the current stderr line (progress output)."""
    click.echo(f"\r{message}", nl=False, err=True)
