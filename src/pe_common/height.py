"""Ordering counter (block height) used for listing expiry and trade timestamps.

Height is derived from wall-clock time:
  height = (unix_seconds - epoch_seconds) // block_interval_seconds

It never decreases within a process: a clock step backwards keeps returning
the last height handed out.
"""

import threading
import time
from typing import Protocol

from config.settings import settings


class HeightProvider(Protocol):
    def current_height(self) -> int: ...


class WallClockHeight:
    """Height clock over a fixed epoch and block interval."""

    def __init__(self, epoch_seconds: int, block_interval_seconds: int) -> None:
        if block_interval_seconds <= 0:
            raise ValueError("block_interval_seconds must be positive")
        self._epoch_seconds = epoch_seconds
        self._block_interval_seconds = block_interval_seconds
        self._last_height = 0
        self._lock = threading.Lock()

    def current_height(self) -> int:
        with self._lock:
            elapsed = max(0, int(self._current_seconds()) - self._epoch_seconds)
            height = elapsed // self._block_interval_seconds
            if height < self._last_height:
                height = self._last_height
            self._last_height = height
            return height

    def _current_seconds(self) -> float:
        return time.time()


_default_clock = WallClockHeight(
    epoch_seconds=settings.HEIGHT_EPOCH_SECONDS,
    block_interval_seconds=settings.BLOCK_INTERVAL_SECONDS,
)


def get_height_clock() -> WallClockHeight:
    """Return the process-wide height clock."""
    return _default_clock


def current_height() -> int:
    """Current height from the module-level default clock."""
    return _default_clock.current_height()
