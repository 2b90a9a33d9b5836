"""Tests for prefix/delimiter listing emulation and cursors."""

import pytest

from filedrop.domain.exceptions import ValidationException
from filedrop.infrastructure.external.storage.listing import (
    decode_cursor,
    encode_cursor,
    paginate_keys,
)

KEYS = [
    "top.txt",
    "a/x.txt",
    "a/b/y.txt",
    "a/b/z.txt",
    "a/c/deep/q.txt",
    "a/w.txt",
    "b/only.txt",
]


def test_root_listing_rolls_up_folders() -> None:
    page = paginate_keys(KEYS)
    assert page.common_prefixes == ["a/", "b/"]
    assert page.keys == ["top.txt"]
    assert page.truncated is False
    assert page.cursor is None


def test_prefix_listing_returns_immediate_children() -> None:
    page = paginate_keys(KEYS, prefix="a/")
    assert page.common_prefixes == ["a/b/", "a/c/"]
    assert page.keys == ["a/w.txt", "a/x.txt"]


def test_empty_delimiter_lists_recursively() -> None:
    page = paginate_keys(KEYS, prefix="a/", delimiter="")
    assert page.common_prefixes == []
    assert page.keys == sorted(k for k in KEYS if k.startswith("a/"))


def test_prefix_need_not_end_at_folder_boundary() -> None:
    page = paginate_keys(["apple.txt", "apricot/x", "banana"], prefix="ap")
    assert page.keys == ["apple.txt"]
    assert page.common_prefixes == ["apricot/"]


def test_limit_counts_prefixes_and_keys() -> None:
    """Pages stop at limit entries; the cursor resumes after the last one."""
    first = paginate_keys(KEYS, limit=2)
    assert first.common_prefixes == ["a/", "b/"]
    assert first.keys == []
    assert first.truncated is True
    assert first.cursor is not None

    second = paginate_keys(KEYS, limit=2, cursor=first.cursor)
    assert second.keys == ["top.txt"]
    assert second.common_prefixes == []
    assert second.truncated is False
    assert second.cursor is None


def test_exact_fit_is_not_truncated() -> None:
    page = paginate_keys(["a", "b"], limit=2)
    assert page.truncated is False
    assert page.cursor is None


def test_paging_visits_every_entry_once() -> None:
    keys = [f"k{i:03d}" for i in range(25)] + [f"dir{i}/f" for i in range(5)]
    seen: list[str] = []
    cursor = None
    while True:
        page = paginate_keys(keys, limit=7, cursor=cursor)
        seen.extend(page.common_prefixes + page.keys)
        if not page.truncated:
            break
        cursor = page.cursor
    assert sorted(seen) == sorted([f"k{i:03d}" for i in range(25)] + [f"dir{i}/" for i in range(5)])
    assert len(seen) == len(set(seen))


def test_cursor_roundtrip_is_opaque() -> None:
    cursor = encode_cursor("a/b/ü.txt")
    assert "/" not in cursor
    assert decode_cursor(cursor) == "a/b/ü.txt"
    assert decode_cursor(cursor.rstrip("=")) == "a/b/ü.txt"


def test_invalid_cursor_raises_validation() -> None:
    with pytest.raises(ValidationException) as exc_info:
        paginate_keys(KEYS, cursor="__4")
    assert exc_info.value.message == "Invalid cursor"
