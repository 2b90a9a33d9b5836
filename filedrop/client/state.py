"""Browser view state and folder-navigation helpers.

Folders exist only as key prefixes; everything here is string work on
those prefixes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from filedrop.client.http import BatchUploadResult

ROOT_LABEL = "Root"


def get_parent_folder(path: str) -> str:
    """Prefix of the folder containing ``path`` (with trailing ``/``), or ``''`` at the top.

    >>> get_parent_folder("a/b/c/")
    'a/b/'
    >>> get_parent_folder("a/")
    ''
    """
    if not path:
        return ""
    clean = path[:-1] if path.endswith("/") else path
    index = clean.rfind("/")
    if index == -1:
        return ""
    return clean[: index + 1]


def folder_display_name(prefix: str) -> str:
    """Last segment of a folder prefix: ``a/b/`` -> ``b``."""
    parts = prefix.split("/")
    return parts[-2] if len(parts) >= 2 else parts[0]


@dataclass(frozen=True)
class Breadcrumb:
    label: str
    prefix: str


def breadcrumbs(prefix: str) -> list[Breadcrumb]:
    """Root followed by one crumb per folder level of ``prefix``."""
    crumbs = [Breadcrumb(ROOT_LABEL, "")]
    path = ""
    for part in (p for p in prefix.split("/") if p):
        path += part + "/"
        crumbs.append(Breadcrumb(part, path))
    return crumbs


@dataclass
class BrowserState:
    """What a file browser is looking at: folder, bucket and last batch errors."""

    current_prefix: str = ""
    selected_bucket: str | None = None
    last_errors: list[dict[str, str]] = field(default_factory=list)

    def set_prefix(self, prefix: str) -> None:
        self.current_prefix = prefix or ""

    def go_up(self) -> str:
        """Move to the parent folder and return the new prefix."""
        self.current_prefix = get_parent_folder(self.current_prefix)
        return self.current_prefix

    def select_bucket(self, bucket: str | None) -> None:
        """Switch bucket; navigation restarts at the bucket root."""
        if bucket != self.selected_bucket:
            self.current_prefix = ""
        self.selected_bucket = bucket or None

    def record_batch(self, result: BatchUploadResult) -> None:
        self.last_errors = list(result.errors)

    def clear_errors(self) -> None:
        self.last_errors = []

    @property
    def breadcrumbs(self) -> list[Breadcrumb]:
        return breadcrumbs(self.current_prefix)

    @property
    def at_root(self) -> bool:
        return not self.current_prefix
