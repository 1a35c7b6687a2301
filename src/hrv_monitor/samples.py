from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _normalize_timestamp(timestamp: datetime | None) -> datetime:
    if timestamp is None:
        return datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp


@dataclass(frozen=True, slots=True)
class SampleItem:
    """A single timestamped reading.

    ``value`` is in the unit of whatever produced it: beats per minute for
    raw heart-rate samples, milliseconds for derived HRV values.
    """

    value: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))
        object.__setattr__(self, "timestamp", _normalize_timestamp(self.timestamp))
