"""Per-owner partition of the record, latest and count tables."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from consensus_monitor.models.kind import MetricKind
from consensus_monitor.models.observation import Observation

RecordKey = tuple[int, MetricKind]
"""``(time, kind)``; the owner is implied by the partition."""


@dataclass
class OwnerTables:
    """All rows keyed by one owner identity.

    Every key in the three tables shares the owner prefix, so an owner's
    partition can be locked and updated independently of other owners.
    """

    records: dict[RecordKey, Observation] = field(default_factory=dict)
    latest: dict[MetricKind, int] = field(default_factory=dict)
    counts: dict[MetricKind, int] = field(default_factory=dict)

    def get(self, time: int, kind: MetricKind) -> Observation | None:
        return self.records.get((time, kind))

    def has(self, time: int, kind: MetricKind) -> bool:
        return (time, kind) in self.records

    def times(self, kind: MetricKind) -> Iterator[int]:
        """Live observation times for *kind*, in no particular order."""
        return (time for (time, record_kind) in self.records if record_kind == kind)

    def commit(
        self,
        kind: MetricKind,
        *,
        time: int,
        observation: Observation | None,
        latest: int | None,
        count: int,
    ) -> None:
        """Write one record row and both index rows for *kind*.

        ``observation=None`` removes the row at *time*; ``latest=None``
        clears the pointer.  A zero count drops the count row.
        """
        if observation is None:
            self.records.pop((time, kind), None)
        else:
            self.records[(time, kind)] = observation
        if latest is None:
            self.latest.pop(kind, None)
        else:
            self.latest[kind] = latest
        if count > 0:
            self.counts[kind] = count
        else:
            self.counts.pop(kind, None)

    def is_empty(self) -> bool:
        return not (self.records or self.latest or self.counts)
