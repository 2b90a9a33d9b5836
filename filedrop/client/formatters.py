"""Human-readable sizes and durations for progress output."""

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")


def format_bytes(num_bytes: float, decimals: int = 2) -> str:
    """Format a byte count with 1024-based units.

    >>> format_bytes(0)
    '0 Bytes'
    >>> format_bytes(1536)
    '1.5 KB'
    """
    if num_bytes == 0:
        return "0 Bytes"
    digits = max(decimals, 0)
    magnitude = abs(num_bytes)
    index = 0
    while magnitude >= 1024 and index < len(_SIZE_UNITS) - 1:
        magnitude /= 1024
        index += 1
    value = num_bytes / (1024**index)
    text = f"{value:.{digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[index]}"


def format_time(seconds: int) -> str:
    """Format whole seconds as ``42 s``, ``3 min 5 s`` or ``2 h 10 min``."""
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds} s"
    if seconds < 3600:
        return f"{seconds // 60} min {seconds % 60} s"
    return f"{seconds // 3600} h {(seconds % 3600) // 60} min"
