"""Upload progress tracking (percent, speed, time remaining)."""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from filedrop.client.formatters import format_bytes, format_time

PROGRESS_UPDATE_INTERVAL = 0.2  # seconds


@dataclass(frozen=True)
class ProgressSnapshot:
    bytes_sent: int
    total_bytes: int
    percent: float
    bytes_per_second: float
    seconds_remaining: int | None

    def describe(self) -> str:
        """One status line, e.g. ``45.00% | 1.5 MB/s | 3 s left``."""
        remaining = (
            format_time(self.seconds_remaining)
            if self.seconds_remaining is not None
            else "Calculating..."
        )
        return (
            f"{self.percent:.2f}% | {format_bytes(self.bytes_per_second)}/s | "
            f"{remaining} left"
        )


class UploadProgress:
    """Throttled progress reporter for one transfer.

    ``update`` emits a snapshot (and calls ``on_update``) only when more than
    ``interval`` seconds passed since the previous one; speed is measured
    over that window. ``finish`` always emits.
    """

    def __init__(
        self,
        total_bytes: int,
        on_update: Callable[[ProgressSnapshot], None] | None = None,
        *,
        interval: float = PROGRESS_UPDATE_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.total_bytes = total_bytes
        self.on_update = on_update
        self.interval = interval
        self._clock = clock
        self._last_time = clock()
        self._last_bytes = 0
        self.bytes_sent = 0
        self.last_snapshot: ProgressSnapshot | None = None

    def _snapshot(self, now: float) -> ProgressSnapshot:
        elapsed = now - self._last_time
        speed = (self.bytes_sent - self._last_bytes) / elapsed if elapsed > 0 else 0.0
        remaining_bytes = max(self.total_bytes - self.bytes_sent, 0)
        seconds_remaining = math.ceil(remaining_bytes / speed) if speed > 0 else None
        percent = (
            self.bytes_sent / self.total_bytes * 100 if self.total_bytes else 100.0
        )
        return ProgressSnapshot(
            bytes_sent=self.bytes_sent,
            total_bytes=self.total_bytes,
            percent=percent,
            bytes_per_second=speed,
            seconds_remaining=seconds_remaining,
        )

    def _emit(self, now: float) -> ProgressSnapshot:
        snapshot = self._snapshot(now)
        self._last_time = now
        self._last_bytes = self.bytes_sent
        self.last_snapshot = snapshot
        if self.on_update is not None:
            self.on_update(snapshot)
        return snapshot

    def update(self, bytes_sent: int) -> ProgressSnapshot | None:
        """Record the running total; return a snapshot when one is due."""
        self.bytes_sent = bytes_sent
        now = self._clock()
        if now - self._last_time <= self.interval:
            return None
        return self._emit(now)

    def advance(self, chunk_size: int) -> ProgressSnapshot | None:
        return self.update(self.bytes_sent + chunk_size)

    def finish(self) -> ProgressSnapshot:
        """Emit a final snapshot regardless of the interval."""
        return self._emit(self._clock())
