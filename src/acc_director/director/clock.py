"""Time sources consumed by the director's switch gate."""

from __future__ import annotations

import time
from typing import Protocol

__all__ = ["Clock", "ManualClock", "SystemClock"]


class Clock(Protocol):
    def now(self) -> float:
        """Return the current time in seconds."""
        ...


class SystemClock:
    """Wall-clock seconds since the epoch."""

    def now(self) -> float:
        return time.time()


class ManualClock:
    """Clock advanced explicitly by its owner.

    Replays drive it from recorded event timestamps; tests use it to step
    through the minimum switch interval deterministically.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def set(self, value: float) -> None:
        value = float(value)
        if value < self._now:
            raise ValueError(f"ManualClock cannot move backwards ({value} < {self._now})")
        self._now = value

    def advance(self, seconds: float) -> float:
        self.set(self._now + float(seconds))
        return self._now
