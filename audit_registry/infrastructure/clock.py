"""Logical clocks. Monotonic non-decreasing integers supplied by the environment."""

import threading
import time


class ManualClock:
    """Clock advanced explicitly by the environment (block height style)."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("logical time cannot be negative")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, ticks: int = 1) -> int:
        if ticks < 0:
            raise ValueError("logical time cannot move backwards")
        self._now += ticks
        return self._now


class WallClock:
    """Unix seconds, clamped so readings never decrease even if the system clock steps back."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, int(time.time()))
            return self._last
