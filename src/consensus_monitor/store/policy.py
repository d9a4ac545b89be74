"""Deterministic index maintenance policy.

This module intentionally contains *no* table access.  The store gathers
the inputs and applies the returned values inside one critical section.

The default policies keep the historical behaviour: the latest pointer
follows the most recent *write*, not the largest live time, and the count
tallies successful record calls rather than distinct keys.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class LatestPolicy(StrEnum):
    OVERWRITE = "overwrite"
    RECOMPUTE = "recompute"


class CountPolicy(StrEnum):
    PER_CALL = "per_call"
    PER_KEY = "per_key"


def latest_after_write(
    policy: LatestPolicy,
    *,
    current: int | None,
    written: int,
) -> int:
    """Pointer value after recording at time *written*.

    Policy:
    - OVERWRITE: always the written time, even when older than *current*.
    - RECOMPUTE: the larger of the two.
    """
    if policy == LatestPolicy.RECOMPUTE and current is not None:
        return max(current, written)
    return written


def latest_after_delete(
    policy: LatestPolicy,
    *,
    current: int | None,
    deleted: int,
    remaining: Iterable[int],
) -> int | None:
    """Pointer value after deleting the record at time *deleted*.

    Policy:
    - Deleting any time other than *current* leaves the pointer alone.
    - OVERWRITE: deleting the pointed-to time clears the pointer.
    - RECOMPUTE: fall back to the largest remaining live time, if any.
    """
    if current != deleted:
        return current
    if policy == LatestPolicy.RECOMPUTE:
        return max(remaining, default=None)
    return None


def count_after_write(policy: CountPolicy, *, current: int, key_existed: bool) -> int:
    if policy == CountPolicy.PER_KEY and key_existed:
        return current
    return current + 1


def count_after_delete(current: int) -> int:
    # Floor at zero.
    return max(current - 1, 0)
