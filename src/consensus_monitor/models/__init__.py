"""Data models for stored observations."""

from consensus_monitor.models.kind import MetricKind
from consensus_monitor.models.observation import Observation, SharedObservation

__all__ = [
    "MetricKind",
    "Observation",
    "SharedObservation",
]
