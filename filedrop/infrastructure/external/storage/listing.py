"""Prefix/delimiter listing over a sorted key set.

Used by backends without a native listing API (memory, local filesystem).
Matches S3 ``ListObjectsV2`` semantics: keys under ``prefix`` whose
remainder contains ``delimiter`` are rolled up into one common prefix, and
common prefixes count towards ``limit`` like objects do.
"""

import base64
import binascii
from collections.abc import Iterable
from dataclasses import dataclass, field

from filedrop.domain.exceptions import ValidationException


@dataclass(frozen=True)
class KeyPage:
    """Keys and common prefixes selected for one page."""

    keys: list[str] = field(default_factory=list)
    common_prefixes: list[str] = field(default_factory=list)
    truncated: bool = False
    cursor: str | None = None


def encode_cursor(marker: str) -> str:
    """Opaque cursor for the last entry returned on a page."""
    return base64.urlsafe_b64encode(marker.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> str:
    """Inverse of encode_cursor. Raises ValidationException on garbage."""
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ValidationException("Invalid cursor", field="cursor") from e


def paginate_keys(
    keys: Iterable[str],
    prefix: str = "",
    delimiter: str = "/",
    limit: int = 1000,
    cursor: str | None = None,
) -> KeyPage:
    """Select one page of entries from ``keys``.

    Args:
        keys: All keys in the bucket (any order).
        prefix: Only keys starting with this are considered.
        delimiter: Roll-up separator; empty lists recursively.
        limit: Maximum number of entries (objects plus common prefixes).
        cursor: Cursor from the previous page.

    Returns:
        KeyPage; ``cursor`` is set when more entries follow.
    """
    marker = decode_cursor(cursor) if cursor else None
    selected: list[str] = []
    prefixes: list[str] = []
    last: str | None = None
    truncated = False

    for key in sorted(k for k in keys if k.startswith(prefix)):
        entry = key
        is_prefix = False
        if delimiter:
            idx = key.find(delimiter, len(prefix))
            if idx >= 0:
                entry = key[: idx + len(delimiter)]
                is_prefix = True
        # A common prefix sorts before every key it covers, so comparing
        # entries against the marker skips whole folders already returned.
        if marker is not None and entry <= marker:
            continue
        if is_prefix and entry == last:
            continue
        if len(selected) + len(prefixes) >= limit:
            truncated = True
            break
        if is_prefix:
            prefixes.append(entry)
        else:
            selected.append(key)
        last = entry

    return KeyPage(
        keys=selected,
        common_prefixes=prefixes,
        truncated=truncated,
        cursor=encode_cursor(last) if truncated and last is not None else None,
    )
