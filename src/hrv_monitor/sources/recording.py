from __future__ import annotations

import threading
from collections import deque
from datetime import datetime
from typing import Sequence

import reactivex
from reactivex.disposable import Disposable

from hrv_monitor.errors import SourceUnavailableError
from hrv_monitor.samples import SampleItem
from hrv_monitor.utilities.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RECORDING_CAPACITY = 3600


class RecordingSampleSource:
    """In-memory sample source fed by pushed readings.

    Readings arrive through :meth:`record` or from an attached observable
    (for example a sensor peripheral stream) and are served back through
    :meth:`fetch_latest`.
    """

    def __init__(self, capacity: int = DEFAULT_RECORDING_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._samples: deque[SampleItem] = deque(maxlen=capacity)
        self._mutex = threading.Lock()
        self._closed = False
        self._subscriptions: list[Disposable] = []

    def record(self, value: float, timestamp: datetime | None = None) -> SampleItem:
        sample = SampleItem(value=value, timestamp=timestamp)
        self.record_sample(sample)
        return sample

    def record_sample(self, sample: SampleItem) -> None:
        with self._mutex:
            if self._closed:
                logger.debug("Dropping sample recorded after close: %s", sample)
                return
            self._samples.append(sample)

    def attach(self, stream: reactivex.Observable[SampleItem]) -> Disposable:
        """Record every sample emitted by ``stream`` until disposed."""

        subscription = stream.subscribe(
            on_next=self.record_sample,
            on_error=lambda exc: logger.error("Attached sample stream failed: %s", exc),
        )
        self._subscriptions.append(subscription)
        return subscription

    def fetch_latest(
        self, limit: int, sort_descending: bool = True
    ) -> Sequence[SampleItem]:
        if limit < 0:
            raise ValueError("limit must not be negative")
        with self._mutex:
            if self._closed:
                raise SourceUnavailableError("recording source has been closed")
            # Timestamps may arrive out of order from attached streams.
            ordered = sorted(self._samples, key=lambda sample: sample.timestamp)
        latest = ordered[-limit:] if limit else []
        if sort_descending:
            latest.reverse()
        return latest

    def close(self) -> None:
        with self._mutex:
            self._closed = True
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()

    def __len__(self) -> int:
        with self._mutex:
            return len(self._samples)
