"""Replay of a recorded heart-rate ramp for demos and tests."""

from __future__ import annotations

import random
import threading
from datetime import datetime, timedelta, timezone
from typing import Sequence

from hrv_monitor.samples import SampleItem

# Strap readings captured while heart rate climbed from ~70 to ~110 bpm.
RECORDED_RAMP_BPM: tuple[float, ...] = (
    73, 74, 74, 76, 76, 80, 83, 84, 87, 90, 91, 91, 92, 94, 94, 94, 96, 97,
    97, 97, 105, 106, 107, 107, 108, 108, 109, 109, 111, 112, 111, 111, 110,
    110, 110, 110, 110, 110, 110, 111, 110,
)


class SimulatedHeartRateSource:
    """Serve the recorded ramp one sample per ``interval``, looping forever.

    Every fetch advances the replay by ``limit`` samples so that successive
    polls observe new data. ``jitter`` adds uniform noise of up to that many
    bpm to each reading.
    """

    def __init__(
        self,
        bpms: Sequence[float] = RECORDED_RAMP_BPM,
        *,
        start: datetime | None = None,
        interval: timedelta = timedelta(seconds=1),
        jitter: float = 0.0,
        seed: int | None = None,
    ) -> None:
        if not bpms:
            raise ValueError("bpms must contain at least one reading")
        if jitter < 0:
            raise ValueError("jitter must not be negative")
        self._bpms = tuple(float(bpm) for bpm in bpms)
        self._start = start or datetime.now(timezone.utc)
        self._interval = interval
        self._jitter = jitter
        self._rng = random.Random(seed)
        self._cursor = 0
        self._lock = threading.Lock()

    def _sample_at(self, index: int) -> SampleItem:
        bpm = self._bpms[index % len(self._bpms)]
        if self._jitter:
            bpm = max(1.0, bpm + self._rng.uniform(-self._jitter, self._jitter))
        return SampleItem(value=bpm, timestamp=self._start + index * self._interval)

    def fetch_latest(
        self, limit: int, sort_descending: bool = True
    ) -> Sequence[SampleItem]:
        if limit < 0:
            raise ValueError("limit must not be negative")
        with self._lock:
            first = self._cursor
            self._cursor += limit
            samples = [self._sample_at(index) for index in range(first, first + limit)]
        if sort_descending:
            samples.reverse()
        return samples
