from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from hrv_monitor.samples import SampleItem


@runtime_checkable
class SampleSource(Protocol):
    """Anything that can hand back the most recent heart-rate readings."""

    def fetch_latest(
        self, limit: int, sort_descending: bool = True
    ) -> Sequence[SampleItem]:
        """Return up to ``limit`` of the most recent samples.

        With ``sort_descending`` the newest sample comes first. Implementations
        raise :class:`~hrv_monitor.errors.SourceUnavailableError` when they
        cannot be queried and may return an empty sequence.
        """
        ...
