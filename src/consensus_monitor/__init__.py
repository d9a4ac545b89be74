"""consensus_monitor - Validated per-owner store for network-health observations."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("consensus-monitor")
except PackageNotFoundError:
    __version__ = "0+local"
from consensus_monitor.client import ObserverClient
from consensus_monitor.clock import ManualClock, TrustedClock, system_clock
from consensus_monitor.config import MonitorConfig
from consensus_monitor.exceptions import (
    FutureTimestampError,
    InvalidKindError,
    InvalidMeasurementError,
    MonitorConfigError,
    MonitorError,
    ObservationError,
    RecordNotFoundError,
    UnauthorizedError,
)
from consensus_monitor.models import MetricKind, Observation, SharedObservation
from consensus_monitor.store.policy import CountPolicy, LatestPolicy
from consensus_monitor.store.store import ObservationStore
from consensus_monitor.validation import is_valid_kind, is_valid_measurement

__all__ = [
    "__version__",
    "CountPolicy",
    "FutureTimestampError",
    "InvalidKindError",
    "InvalidMeasurementError",
    "LatestPolicy",
    "ManualClock",
    "MetricKind",
    "MonitorConfig",
    "MonitorConfigError",
    "MonitorError",
    "Observation",
    "ObservationError",
    "ObservationStore",
    "ObserverClient",
    "RecordNotFoundError",
    "SharedObservation",
    "TrustedClock",
    "UnauthorizedError",
    "is_valid_kind",
    "is_valid_measurement",
    "system_clock",
]
