"""Caller-bound access to an observation store."""

from __future__ import annotations

import logging
from typing import Any

from consensus_monitor.exceptions import UnauthorizedError
from consensus_monitor.models.observation import Observation, SharedObservation
from consensus_monitor.store.store import ObservationStore
from consensus_monitor.validation import is_valid_kind, is_valid_measurement

_logger = logging.getLogger(__name__)


class ObserverClient:
    """Store access on behalf of one authenticated caller.

    The host authenticates the caller and hands the identity in; every
    mutation then lands in that caller's own key space.

    Usage::

        client = ObserverClient(store, "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7")
        client.record(MetricKind.CONSENSUS_LATENCY, 1200, 100)
        client.get_count(client.caller, MetricKind.CONSENSUS_LATENCY)
    """

    is_valid_kind = staticmethod(is_valid_kind)
    is_valid_measurement = staticmethod(is_valid_measurement)

    def __init__(self, store: ObservationStore, caller: str) -> None:
        if not isinstance(caller, str) or not caller.strip():
            raise ValueError("caller must be a non-empty string")
        self._store = store
        self._caller = caller.strip()

    @property
    def caller(self) -> str:
        return self._caller

    @property
    def store(self) -> ObservationStore:
        return self._store

    def for_caller(self, caller: str) -> ObserverClient:
        """Return a client for *caller* over the same store."""
        return ObserverClient(self._store, caller)

    def _authorize(self, owner: str | None, operation: str) -> None:
        if owner is None or owner.strip() == self._caller:
            return
        _logger.debug("Rejected %s by caller=%s on owner=%s", operation, self._caller, owner)
        raise UnauthorizedError(
            f"{self._caller} may not {operation} observations owned by {owner}",
            owner=owner,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def record(self, kind: Any, value: int, time: int, annotation: str | None = None) -> None:
        self._store.record(self._caller, kind, value, time, annotation)

    def amend(
        self,
        time: int,
        kind: Any,
        value: int,
        annotation: str | None = None,
        *,
        owner: str | None = None,
    ) -> None:
        """Amend one of the caller's observations.

        Passing an *owner* other than the caller raises
        :class:`UnauthorizedError` before anything else is checked.
        """
        self._authorize(owner, "amend")
        self._store.amend(self._caller, time, kind, value, annotation)

    def delete(self, time: int, kind: Any, *, owner: str | None = None) -> None:
        self._authorize(owner, "delete")
        self._store.delete(self._caller, time, kind)

    def share(self, recipient: Any, kind: Any, time: int, *, owner: str | None = None) -> SharedObservation:
        self._authorize(owner, "share")
        return self._store.share(self._caller, recipient, kind, time)

    # ------------------------------------------------------------------
    # Queries (any owner)
    # ------------------------------------------------------------------

    def get(self, owner: str, time: int, kind: Any) -> Observation | None:
        return self._store.get(owner, time, kind)

    def get_latest(self, owner: str, kind: Any) -> Observation | None:
        return self._store.get_latest(owner, kind)

    def get_count(self, owner: str, kind: Any) -> int:
        return self._store.get_count(owner, kind)
