"""Observation payload models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from consensus_monitor.models.kind import MetricKind


class Observation(BaseModel):
    """A stored measurement.

    The identity key ``(owner, time, kind)`` lives in the store; this model
    is the payload held at that key.

    Parameters
    ----------
    value : int
        Measurement value, already range-checked for its kind.
    annotation : str or None
        Optional free-text note.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: int = Field(..., ge=0, serialization_alias="reading")
    annotation: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("value must be an integer, not a bool")
        return value


class SharedObservation(BaseModel):
    """Result of a share: a copy of one observation addressed to a recipient.

    Nothing about the share is stored; delivering the payload to
    ``recipient`` is up to the host, so the recipient is kept as given.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    owner: str
    recipient: Any
    kind: MetricKind
    time: int
    observation: Observation

    @property
    def value(self) -> int:
        return self.observation.value

    @property
    def annotation(self) -> str | None:
        return self.observation.annotation

    def to_payload(self) -> dict[str, Any]:
        """Return the delivery dict ``{"reading": ..., "annotation": ...}``."""
        return self.observation.model_dump(by_alias=True)
