"""Custom exception hierarchy for consensus_monitor."""

from __future__ import annotations

from typing import Any

from consensus_monitor._constants import (
    ERR_FUTURE_TIMESTAMP,
    ERR_INVALID_KIND,
    ERR_INVALID_MEASUREMENT,
    ERR_RECORD_NOT_FOUND,
    ERR_UNAUTHORIZED,
)


class MonitorError(Exception):
    """Base exception for all consensus_monitor errors."""


class MonitorConfigError(MonitorError):
    """Invalid or missing configuration."""


class ObservationError(MonitorError):
    """A store operation was rejected.

    Every rejection leaves the store untouched.  ``code`` is the numeric
    error tag hosts forward to their callers.
    """

    code: int = 0

    def __init__(
        self,
        message: str,
        *,
        owner: str = "",
        kind: Any = None,
        time: int | None = None,
    ) -> None:
        self.owner = owner
        self.kind = kind
        self.time = time
        super().__init__(message)


class UnauthorizedError(ObservationError):
    """The caller tried to mutate or share another identity's observation."""

    code = ERR_UNAUTHORIZED


class InvalidKindError(ObservationError):
    """Kind is not one of the eight metric kinds."""

    code = ERR_INVALID_KIND


class InvalidMeasurementError(ObservationError):
    """Value lies outside the kind's acceptance range."""

    code = ERR_INVALID_MEASUREMENT

    def __init__(
        self,
        message: str,
        *,
        owner: str = "",
        kind: Any = None,
        time: int | None = None,
        value: Any = None,
    ) -> None:
        self.value = value
        super().__init__(message, owner=owner, kind=kind, time=time)


class RecordNotFoundError(ObservationError):
    """No live observation exists at the requested key."""

    code = ERR_RECORD_NOT_FOUND


class FutureTimestampError(ObservationError):
    """Observation time lies ahead of the trusted clock.

    ``now`` holds the clock reading the time was checked against.
    """

    code = ERR_FUTURE_TIMESTAMP

    def __init__(
        self,
        message: str,
        *,
        owner: str = "",
        kind: Any = None,
        time: int | None = None,
        now: int | None = None,
    ) -> None:
        self.now = now
        super().__init__(message, owner=owner, kind=kind, time=time)
