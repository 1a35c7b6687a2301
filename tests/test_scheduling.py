import threading
import time
from datetime import timedelta

import pytest

from hrv_monitor.poller import HeartRatePoller, PollerState
from hrv_monitor.scheduling import poll_every
from hrv_monitor.sources import SimulatedHeartRateSource
from tests.helpers import T0


class CountingSource(SimulatedHeartRateSource):
    def __init__(self, expected: int) -> None:
        super().__init__(start=T0)
        self.fetches = 0
        self.reached = threading.Event()
        self._expected = expected

    def fetch_latest(self, limit, sort_descending=True):
        self.fetches += 1
        if self.fetches >= self._expected:
            self.reached.set()
        return super().fetch_latest(limit, sort_descending)


class TestPollEvery:
    """Timer-driven polling kept outside the poller."""

    def test_polls_repeatedly_until_disposed(self, immediate_scheduler) -> None:
        source = CountingSource(expected=3)
        poller = HeartRatePoller(source, scheduler=immediate_scheduler)
        poller.resume()

        subscription = poll_every(poller, timedelta(milliseconds=20))
        try:
            assert source.reached.wait(timeout=5)
        finally:
            subscription.dispose()

        # Allow a tick that was already firing to finish.
        time.sleep(0.05)
        assert poller.status is PollerState.ACTIVE
        assert len(poller.hrv_history()) >= 3
        settled = source.fetches
        time.sleep(0.1)
        assert source.fetches == settled

    def test_accepts_seconds(self, immediate_scheduler) -> None:
        source = CountingSource(expected=1)
        poller = HeartRatePoller(source, scheduler=immediate_scheduler)

        subscription = poll_every(poller, 0.01)
        try:
            assert source.reached.wait(timeout=5)
        finally:
            subscription.dispose()

    @pytest.mark.parametrize("interval", [0, -1, timedelta(0)])
    def test_rejects_non_positive_interval(self, interval, immediate_scheduler) -> None:
        poller = HeartRatePoller(CountingSource(expected=1), scheduler=immediate_scheduler)

        with pytest.raises(ValueError):
            poll_every(poller, interval)
