"""Trusted clock collaborators.

A trusted clock is any zero-argument callable returning the current time
as an integer.  The store only uses it to reject observations dated in
the future.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

TrustedClock = Callable[[], int]


def system_clock() -> int:
    """Current epoch timestamp in seconds."""
    return int(time.time())


class ManualClock:
    """Host-driven clock, e.g. fed from the latest block height.

    Usage::

        clock = ManualClock(100)
        store = ObservationStore(clock=clock)
        clock.advance()
    """

    def __init__(self, now: int = 0) -> None:
        if now < 0:
            raise ValueError(f"clock time must be non-negative, got {now}")
        self._now = now
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return self._now

    def set(self, now: int) -> None:
        """Move the clock to *now*; it never moves backwards."""
        with self._lock:
            if now < self._now:
                raise ValueError(f"clock cannot move backwards from {self._now} to {now}")
            self._now = now

    def advance(self, delta: int = 1) -> int:
        if delta < 0:
            raise ValueError(f"delta must be non-negative, got {delta}")
        with self._lock:
            self._now += delta
            return self._now
