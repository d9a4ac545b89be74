"""Metric kinds and their acceptance ranges.

The kind set is closed: there is no ``UNKNOWN`` member and no runtime
registration.  Integer values are the wire tags hosts submit.
"""

from __future__ import annotations

import enum
from typing import Any

from consensus_monitor._constants import KIND_RANGES, KIND_SLUGS


class MetricKind(enum.IntEnum):
    """One of the eight network-health metric categories."""

    CONSENSUS_LATENCY = 1
    BLOCK_PROPAGATION = 2
    TX_VALIDATION_TIME = 3
    MEMPOOL_SIZE = 4
    NODE_AVAILABILITY = 5
    NETWORK_THROUGHPUT = 6
    STAKER_PARTICIPATION = 7
    PEER_CONNECTIVITY = 8

    @property
    def slug(self) -> str:
        """Hyphenated name, e.g. ``"consensus-latency"``."""
        return KIND_SLUGS[self.value]

    @property
    def minimum(self) -> int:
        return KIND_RANGES[self.value][0]

    @property
    def maximum(self) -> int:
        return KIND_RANGES[self.value][1]

    def accepts(self, value: int) -> bool:
        """Return ``True`` when *value* lies in this kind's inclusive range."""
        return self.minimum <= value <= self.maximum

    @classmethod
    def parse(cls, value: Any) -> MetricKind | None:
        """Resolve a member, wire tag or slug; ``None`` for anything else."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return None
        if isinstance(value, str):
            return _BY_SLUG.get(value.strip().lower())
        return None


_BY_SLUG: dict[str, MetricKind] = {kind.slug: kind for kind in MetricKind}
