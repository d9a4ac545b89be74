"""In-memory observation store.

This is the only component allowed to write the record table, the latest
index and the count index.  The three are always written together.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError

from consensus_monitor.clock import TrustedClock, system_clock
from consensus_monitor.config import MonitorConfig
from consensus_monitor.exceptions import (
    FutureTimestampError,
    InvalidKindError,
    InvalidMeasurementError,
    RecordNotFoundError,
)
from consensus_monitor.models.kind import MetricKind
from consensus_monitor.models.observation import Observation, SharedObservation
from consensus_monitor.store.policy import (
    count_after_delete,
    count_after_write,
    latest_after_delete,
    latest_after_write,
)
from consensus_monitor.store.tables import OwnerTables
from consensus_monitor.validation import is_valid_kind, is_valid_measurement, is_valid_time

_logger = logging.getLogger(__name__)


def _require_owner(owner: str) -> str:
    if not isinstance(owner, str) or not owner.strip():
        raise ValueError("owner must be a non-empty string")
    return owner.strip()


def _require_time(time: Any) -> int:
    if not is_valid_time(time):
        raise ValueError(f"observation time must be a non-negative integer, got {time!r}")
    return int(time)


def _query_owner(owner: Any) -> str | None:
    if not isinstance(owner, str) or not owner.strip():
        return None
    return owner.strip()


class ObservationStore:
    """Validated per-owner observation store.

    Every mutating method takes the owner identity explicitly; binding it
    to an authenticated caller is the job of
    :class:`consensus_monitor.client.ObserverClient`.

    Each owner's rows sit behind that owner's lock.  Writes to different
    owners never contend, and a reader never sees a record row without the
    matching index rows.
    """

    is_valid_kind = staticmethod(is_valid_kind)
    is_valid_measurement = staticmethod(is_valid_measurement)

    def __init__(
        self,
        config: MonitorConfig | None = None,
        *,
        clock: TrustedClock = system_clock,
    ) -> None:
        self._config = config if config is not None else MonitorConfig()
        self._clock = clock
        self._owners: dict[str, OwnerTables] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    @property
    def config(self) -> MonitorConfig:
        return self._config

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    @contextmanager
    def _partition(self, owner: str, *, create: bool) -> Iterator[OwnerTables | None]:
        """Hold *owner*'s lock and yield its tables.

        Yields ``None`` without locking when the owner has no partition and
        *create* is false.  A partition left with no rows is dropped from
        the registry before its lock is released.
        """
        while True:
            with self._registry_lock:
                lock = self._locks.get(owner)
                if lock is None and create:
                    lock = self._locks[owner] = threading.Lock()
                    self._owners[owner] = OwnerTables()
            if lock is None:
                yield None
                return
            lock.acquire()
            with self._registry_lock:
                tables = self._owners.get(owner) if self._locks.get(owner) is lock else None
            if tables is not None:
                break
            # Reclaimed while we waited; start over with the current lock.
            lock.release()
        try:
            yield tables
        finally:
            if tables.is_empty():
                with self._registry_lock:
                    self._owners.pop(owner, None)
                    self._locks.pop(owner, None)
            lock.release()

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _require_measurement(self, owner: str, kind: Any, value: Any, time: Any) -> MetricKind:
        """Kind first, then range.  Returns the resolved kind."""
        resolved = MetricKind.parse(kind)
        if resolved is None:
            _logger.debug("Rejected invalid kind owner=%s kind=%r", owner, kind)
            raise InvalidKindError(f"unknown metric kind {kind!r}", owner=owner, kind=kind, time=time)
        if not is_valid_measurement(resolved, value):
            _logger.debug("Rejected out-of-range value owner=%s kind=%s value=%r", owner, resolved.slug, value)
            raise InvalidMeasurementError(
                f"{resolved.slug} value must be between {resolved.minimum} and {resolved.maximum}, got {value!r}",
                owner=owner,
                kind=resolved,
                time=time,
                value=value,
            )
        return resolved

    def _build(self, value: int, annotation: str | None) -> Observation:
        if annotation is not None:
            if not isinstance(annotation, str):
                raise ValueError(f"annotation must be a string or None, got {type(annotation).__name__}")
            if len(annotation) > self._config.annotation_max_length:
                raise ValueError(
                    f"annotation must be at most {self._config.annotation_max_length} characters, got {len(annotation)}"
                )
        try:
            return Observation(value=value, annotation=annotation)
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def record(
        self,
        owner: str,
        kind: Any,
        value: int,
        time: int,
        annotation: str | None = None,
    ) -> None:
        """Write an observation at ``(owner, time, kind)``.

        An existing row at the same key is replaced.  The latest pointer and
        count for ``(owner, kind)`` are updated per the configured policies.

        Raises
        ------
        InvalidKindError
            *kind* is not a metric kind.
        InvalidMeasurementError
            *value* is outside the kind's range.
        FutureTimestampError
            *time* is ahead of the trusted clock.
        """
        owner = _require_owner(owner)
        resolved = self._require_measurement(owner, kind, value, time)
        time = _require_time(time)
        now = self._clock()
        if time > now + self._config.clock_skew_allowance:
            _logger.debug("Rejected future observation owner=%s time=%d now=%d", owner, time, now)
            raise FutureTimestampError(
                f"observation time {time} is ahead of current time {now}",
                owner=owner,
                kind=resolved,
                time=time,
                now=now,
            )
        observation = self._build(value, annotation)

        with self._partition(owner, create=True) as tables:
            assert tables is not None  # noqa: S101
            latest = latest_after_write(
                self._config.latest_policy,
                current=tables.latest.get(resolved),
                written=time,
            )
            count = count_after_write(
                self._config.count_policy,
                current=tables.counts.get(resolved, 0),
                key_existed=tables.has(time, resolved),
            )
            tables.commit(resolved, time=time, observation=observation, latest=latest, count=count)

        _logger.debug("Recorded observation owner=%s kind=%s time=%d", owner, resolved.slug, time)

    def amend(
        self,
        owner: str,
        time: int,
        kind: Any,
        value: int,
        annotation: str | None = None,
    ) -> None:
        """Replace the value and annotation of an existing observation.

        The key, the latest pointer and the count are left as they are.

        Raises
        ------
        InvalidKindError
            *kind* is not a metric kind.
        InvalidMeasurementError
            *value* is outside the kind's range.
        RecordNotFoundError
            Nothing is stored at ``(owner, time, kind)``.
        """
        owner = _require_owner(owner)
        resolved = self._require_measurement(owner, kind, value, time)
        time = _require_time(time)
        observation = self._build(value, annotation)

        with self._partition(owner, create=False) as tables:
            if tables is None or not tables.has(time, resolved):
                _logger.debug("Rejected missing record owner=%s kind=%s time=%d", owner, resolved.slug, time)
                raise RecordNotFoundError(
                    f"no {resolved.slug} observation at time {time}",
                    owner=owner,
                    kind=resolved,
                    time=time,
                )
            tables.records[(time, resolved)] = observation

        _logger.debug("Amended observation owner=%s kind=%s time=%d", owner, resolved.slug, time)

    def delete(self, owner: str, time: int, kind: Any) -> None:
        """Remove the observation at ``(owner, time, kind)``.

        Raises
        ------
        RecordNotFoundError
            Nothing is stored at that key.
        """
        owner = _require_owner(owner)
        time = _require_time(time)
        resolved = MetricKind.parse(kind)

        with self._partition(owner, create=False) as tables:
            if resolved is None or tables is None or not tables.has(time, resolved):
                _logger.debug("Rejected missing record owner=%s kind=%r time=%d", owner, kind, time)
                raise RecordNotFoundError(
                    f"no observation of kind {kind!r} at time {time}",
                    owner=owner,
                    kind=kind,
                    time=time,
                )
            remaining = (t for t in tables.times(resolved) if t != time)
            latest = latest_after_delete(
                self._config.latest_policy,
                current=tables.latest.get(resolved),
                deleted=time,
                remaining=remaining,
            )
            count = count_after_delete(tables.counts.get(resolved, 0))
            tables.commit(resolved, time=time, observation=None, latest=latest, count=count)

        _logger.debug("Deleted observation owner=%s kind=%s time=%d", owner, resolved.slug, time)

    def share(self, owner: str, recipient: Any, kind: Any, time: int) -> SharedObservation:
        """Return a copy of one of *owner*'s observations for *recipient*.

        No grant is recorded and *recipient* is not checked; the returned
        payload is all there is to the share.

        Raises
        ------
        RecordNotFoundError
            Nothing is stored at ``(owner, time, kind)``.
        """
        owner = _require_owner(owner)
        time = _require_time(time)
        resolved = MetricKind.parse(kind)

        with self._partition(owner, create=False) as tables:
            observation = tables.get(time, resolved) if tables is not None and resolved is not None else None
        if observation is None or resolved is None:
            _logger.debug("Rejected missing record owner=%s kind=%r time=%d", owner, kind, time)
            raise RecordNotFoundError(
                f"no observation of kind {kind!r} at time {time}",
                owner=owner,
                kind=kind,
                time=time,
            )

        _logger.debug("Shared observation owner=%s kind=%s time=%d recipient=%r", owner, resolved.slug, time, recipient)
        return SharedObservation(
            owner=owner,
            recipient=recipient,
            kind=resolved,
            time=time,
            observation=observation,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, owner: str, time: int, kind: Any) -> Observation | None:
        """Observation at ``(owner, time, kind)``, or ``None``."""
        owner_key = _query_owner(owner)
        resolved = MetricKind.parse(kind)
        if owner_key is None or resolved is None or not is_valid_time(time):
            return None
        with self._partition(owner_key, create=False) as tables:
            if tables is None:
                return None
            return tables.get(time, resolved)

    def get_latest(self, owner: str, kind: Any) -> Observation | None:
        """Observation at the latest pointer for ``(owner, kind)``, or ``None``.

        Under the default ``OVERWRITE`` policy the pointer follows the most
        recent write, so this can be ``None`` while older observations of
        the kind are still stored.
        """
        owner_key = _query_owner(owner)
        resolved = MetricKind.parse(kind)
        if owner_key is None or resolved is None:
            return None
        with self._partition(owner_key, create=False) as tables:
            if tables is None:
                return None
            latest = tables.latest.get(resolved)
            if latest is None:
                return None
            return tables.get(latest, resolved)

    def get_latest_time(self, owner: str, kind: Any) -> int | None:
        """Raw latest pointer for ``(owner, kind)``."""
        owner_key = _query_owner(owner)
        resolved = MetricKind.parse(kind)
        if owner_key is None or resolved is None:
            return None
        with self._partition(owner_key, create=False) as tables:
            if tables is None:
                return None
            return tables.latest.get(resolved)

    def get_count(self, owner: str, kind: Any) -> int:
        """Running count for ``(owner, kind)``; ``0`` when nothing is stored."""
        owner_key = _query_owner(owner)
        resolved = MetricKind.parse(kind)
        if owner_key is None or resolved is None:
            return 0
        with self._partition(owner_key, create=False) as tables:
            if tables is None:
                return 0
            return tables.counts.get(resolved, 0)
