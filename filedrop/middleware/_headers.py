"""Header helpers shared by the raw ASGI middlewares."""


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("latin-1")
    return None


def _replace_headers(
    headers: list[tuple[bytes, bytes]], updates: dict[str, str]
) -> list[tuple[bytes, bytes]]:
    """Return headers with every name in updates set to exactly one new value."""
    names = {k.lower().encode() for k in updates}
    kept = [(k, v) for k, v in headers if k.lower() not in names]
    kept.extend((k.lower().encode(), v.encode("latin-1")) for k, v in updates.items())
    return kept
