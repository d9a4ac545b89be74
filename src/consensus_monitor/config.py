"""Store configuration for consensus_monitor."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from consensus_monitor._constants import ANNOTATION_MAX_LENGTH
from consensus_monitor.exceptions import MonitorConfigError
from consensus_monitor.store.policy import CountPolicy, LatestPolicy


def _env_int(value: str, env_key: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise MonitorConfigError(f"{env_key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class MonitorConfig:
    """Store configuration.

    Parameters
    ----------
    annotation_max_length : int
        Longest accepted annotation, in characters.
    latest_policy : LatestPolicy
        How the per-(owner, kind) latest pointer is maintained.
        ``OVERWRITE`` (default) follows the most recent write and is
        cleared when its record is deleted.  ``RECOMPUTE`` always tracks
        the largest live time.
    count_policy : CountPolicy
        ``PER_CALL`` (default) counts every successful record, including
        overwrites of an existing key.  ``PER_KEY`` counts distinct keys.
    clock_skew_allowance : int
        Observation times up to ``now + clock_skew_allowance`` are accepted.
        Defaults to ``0``.
    """

    annotation_max_length: int = ANNOTATION_MAX_LENGTH
    latest_policy: LatestPolicy = LatestPolicy.OVERWRITE
    count_policy: CountPolicy = CountPolicy.PER_CALL
    clock_skew_allowance: int = 0

    def __post_init__(self) -> None:
        for field_name in ("annotation_max_length", "clock_skew_allowance"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise MonitorConfigError(f"{field_name} must be an integer, got {value!r}")
        if self.annotation_max_length < 0:
            raise MonitorConfigError(f"annotation_max_length must be non-negative, got {self.annotation_max_length}")
        if self.clock_skew_allowance < 0:
            raise MonitorConfigError(f"clock_skew_allowance must be non-negative, got {self.clock_skew_allowance}")
        try:
            object.__setattr__(self, "latest_policy", LatestPolicy(self.latest_policy))
            object.__setattr__(self, "count_policy", CountPolicy(self.count_policy))
        except ValueError as exc:
            raise MonitorConfigError(str(exc)) from exc

    @classmethod
    def from_env(cls, **overrides: Any) -> MonitorConfig:
        """Create configuration from environment variables.

        Reads optional ``CONSENSUS_MONITOR_*`` variables.  Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        MonitorConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_POLICY_MAP = {
            "CONSENSUS_MONITOR_LATEST_POLICY": "latest_policy",
            "CONSENSUS_MONITOR_COUNT_POLICY": "count_policy",
        }
        _ENV_INT_MAP = {
            "CONSENSUS_MONITOR_ANNOTATION_MAX_LENGTH": "annotation_max_length",
            "CONSENSUS_MONITOR_CLOCK_SKEW": "clock_skew_allowance",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_POLICY_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val.strip().lower()

        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_int(val, env_key)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
