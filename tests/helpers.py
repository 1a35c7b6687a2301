from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence

from hrv_monitor.errors import SourceUnavailableError
from hrv_monitor.samples import SampleItem

T0 = datetime(2022, 3, 7, 12, 0, tzinfo=timezone.utc)


def samples_from(values: Sequence[float], *, start: datetime = T0) -> list[SampleItem]:
    """Build one sample per second starting at ``start``."""

    return [
        SampleItem(value=value, timestamp=start + timedelta(seconds=index))
        for index, value in enumerate(values)
    ]


class ScriptedSource:
    """Sample source that serves queued responses, newest-first.

    Each queued entry is either a chronological list of samples or an
    exception instance to raise. ``on_fetch`` runs inside the fetch, before
    the response is returned, to simulate work racing the fetch.
    """

    def __init__(self, *responses: list[SampleItem] | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[int, bool]] = []
        self.on_fetch: Callable[[], None] | None = None

    def fetch_latest(self, limit: int, sort_descending: bool = True) -> list[SampleItem]:
        self.calls.append((limit, sort_descending))
        if self.on_fetch is not None:
            self.on_fetch()
        if not self.responses:
            raise SourceUnavailableError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        window = response[-limit:]
        return list(reversed(window)) if sort_descending else list(window)
