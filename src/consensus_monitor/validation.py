"""Kind and measurement validation.

Pure, total predicates: they never raise, whatever they are given.  The
store calls them before every mutation; callers may use them to
pre-validate a submission.
"""

from __future__ import annotations

from typing import Any

from consensus_monitor.models.kind import MetricKind


def is_valid_kind(kind: Any) -> bool:
    """Return ``True`` iff *kind* names one of the eight metric kinds."""
    return MetricKind.parse(kind) is not None


def is_valid_measurement(kind: Any, value: Any) -> bool:
    """Return ``True`` iff *kind* is valid and *value* lies in its range."""
    resolved = MetricKind.parse(kind)
    if resolved is None:
        return False
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return resolved.accepts(value)


def is_valid_time(time: Any) -> bool:
    """Observation times are non-negative integers."""
    return isinstance(time, int) and not isinstance(time, bool) and time >= 0
