from __future__ import annotations

import random
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from functools import cached_property
from typing import Callable, Sequence

import reactivex
from reactivex import operators as ops
from reactivex.abc import SchedulerBase
from reactivex.subject import BehaviorSubject, Subject

from hrv_monitor.errors import (EmptyResultError, HrvMonitorError,
                                InvalidSampleError, SourceUnavailableError,
                                StaleResultError)
from hrv_monitor.rolling_store import RollingStore
from hrv_monitor.samples import SampleItem
from hrv_monitor.sources.base import SampleSource
from hrv_monitor.statistics import compute_variability
from hrv_monitor.utilities.env import Configuration
from hrv_monitor.utilities.logging import get_logger
from hrv_monitor.utilities.reactivex_threads import background_scheduler

logger = get_logger(__name__)

DEMO_HRV_RANGE_MS = (1.0, 100.0)


class PollerState(StrEnum):
    STOPPED = "stopped"
    STARTING = "starting"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class PollerSnapshot:
    """Status and latest HRV, always published together."""

    status: PollerState
    latest_hrv: SampleItem | None = None


@dataclass(frozen=True, slots=True)
class PollFailure:
    """A poll that completed without producing a new HRV value."""

    error: HrvMonitorError
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _resolve_positive(value: int | None, fallback: Callable[[], int], name: str) -> int:
    resolved = fallback() if value is None else value
    if resolved < 1:
        raise ValueError(f"{name} must be at least 1")
    return resolved


class HeartRatePoller:
    """Fetch windows of heart-rate samples and derive HRV from each one.

    Polls are triggered externally through :meth:`poll`; the poller never
    schedules itself. Each fetch runs on ``scheduler`` and its result is
    committed under a single lock: the stop flag is checked there, so a
    fetch that completes after :meth:`stop` has no observable effect.

    Subscribers follow :attr:`observe` (or the derived
    :attr:`observe_latest_hrv` / :attr:`observe_status` streams) and
    :attr:`diagnostics` for polls that failed.
    """

    def __init__(
        self,
        source: SampleSource,
        *,
        window_size: int | None = None,
        raw_store_capacity: int | None = None,
        hrv_store_capacity: int | None = None,
        fetch_timeout: float | None = None,
        scheduler: SchedulerBase | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._source = source
        self._window_size = _resolve_positive(
            window_size, Configuration.window_size, "window_size"
        )
        self._raw_store: RollingStore[SampleItem] = RollingStore(
            _resolve_positive(
                raw_store_capacity,
                Configuration.raw_store_capacity,
                "raw_store_capacity",
            )
        )
        self._hrv_store: RollingStore[SampleItem] = RollingStore(
            _resolve_positive(
                hrv_store_capacity,
                Configuration.hrv_store_capacity,
                "hrv_store_capacity",
            )
        )
        if fetch_timeout is None:
            fetch_timeout = Configuration.fetch_timeout_seconds()
        elif fetch_timeout <= 0:
            raise ValueError("fetch_timeout must be positive")
        self._fetch_timeout = fetch_timeout
        self._scheduler = scheduler
        self._rng = rng or random.Random()

        self._lock = threading.RLock()
        # Stopped until start() or resume() re-arms polling.
        self._stop_requested = True
        # Polls are numbered when issued; only results newer than the last
        # committed one may touch the stores.
        self._issued_polls = 0
        self._committed_poll = 0
        self._current = PollerSnapshot(status=PollerState.STOPPED)
        self._snapshots: BehaviorSubject[PollerSnapshot] = BehaviorSubject(self._current)
        self._failures: Subject[PollFailure] = Subject()

        logger.info(
            "Heart rate poller initialized (window=%d, raw store=%d, hrv store=%d)",
            self._window_size,
            self._raw_store.capacity,
            self._hrv_store.capacity,
        )

    # ---------- Subscriber surface ------------------------------------------

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def status(self) -> PollerState:
        with self._lock:
            return self._current.status

    @property
    def latest_hrv(self) -> SampleItem | None:
        with self._lock:
            return self._current.latest_hrv

    def snapshot(self) -> PollerSnapshot:
        with self._lock:
            return self._current

    def is_active(self) -> bool:
        return self.status is PollerState.ACTIVE

    def raw_sample_history(self) -> tuple[SampleItem, ...]:
        return self._raw_store.snapshot()

    def hrv_history(self) -> tuple[SampleItem, ...]:
        return self._hrv_store.snapshot()

    @cached_property
    def observe(self) -> reactivex.Observable[PollerSnapshot]:
        """Replay the current snapshot, then every change."""

        return self._snapshots.pipe(ops.distinct_until_changed())

    @cached_property
    def observe_latest_hrv(self) -> reactivex.Observable[SampleItem | None]:
        return self.observe.pipe(
            ops.map(lambda snapshot: snapshot.latest_hrv),
            ops.distinct_until_changed(),
        )

    @cached_property
    def observe_status(self) -> reactivex.Observable[PollerState]:
        return self.observe.pipe(
            ops.map(lambda snapshot: snapshot.status),
            ops.distinct_until_changed(),
        )

    @property
    def diagnostics(self) -> reactivex.Observable[PollFailure]:
        return self._failures

    # ---------- Lifecycle -----------------------------------------------------

    def start(self) -> None:
        """Arm polling, enter ``starting`` and issue the first fetch."""

        with self._lock:
            if self._current.status is not PollerState.STOPPED:
                logger.warning(
                    "Heart rate poller already %s; ignoring start", self._current.status
                )
                return
            self._stop_requested = False
            self._publish(PollerState.STARTING, self._current.latest_hrv)
        logger.info("Heart rate poller starting")
        self.poll()

    def stop(self) -> None:
        """Stop polling and clear the published HRV.

        A fetch still in flight is not aborted; its result is dropped when
        it completes.
        """

        with self._lock:
            self._stop_requested = True
            self._publish(PollerState.STOPPED, None)
        logger.info("Heart rate poller stopped")

    def resume(self) -> None:
        """Clear the stop flag without leaving ``stopped``."""

        with self._lock:
            self._stop_requested = False
        logger.debug("Heart rate poller stop flag cleared")

    def poll(self) -> None:
        """Request the latest window from the source.

        The result is committed asynchronously. Failures are logged and
        published on :attr:`diagnostics`; they never propagate to the caller.
        A result that arrives after a later poll was committed is dropped.
        """

        with self._lock:
            self._issued_polls += 1
            poll_id = self._issued_polls

        fetch = reactivex.from_callable(
            self._fetch_window, scheduler=self._scheduler or background_scheduler()
        )
        if self._fetch_timeout is not None:
            fetch = fetch.pipe(ops.timeout(timedelta(seconds=self._fetch_timeout)))
        fetch.subscribe(
            on_next=lambda batch: self._on_fetch_completed(poll_id, batch),
            on_error=self._on_fetch_failed,
        )

    def demo(self) -> SampleItem | None:
        """Publish a random HRV value without touching the source or stores."""

        with self._lock:
            if self._stop_requested:
                logger.info("Heart rate poller has been stopped. Skipping demo value")
                return None
            hrv = SampleItem(value=self._rng.uniform(*DEMO_HRV_RANGE_MS))
            self._publish(PollerState.ACTIVE, hrv)
        logger.info("Demo HRV value: %.2f ms", hrv.value)
        return hrv

    # ---------- Fetch completion ----------------------------------------------

    def _fetch_window(self) -> list[SampleItem]:
        try:
            newest_first = self._source.fetch_latest(
                self._window_size, sort_descending=True
            )
        except HrvMonitorError:
            raise
        except Exception as exc:
            raise SourceUnavailableError(f"sample source query failed: {exc}") from exc
        if newest_first is None:
            raise SourceUnavailableError("sample source returned no result")
        return list(reversed(newest_first))

    def _on_fetch_completed(self, poll_id: int, batch: Sequence[SampleItem]) -> None:
        with self._lock:
            if self._stop_requested:
                logger.info(
                    "Heart rate poller has been told to stop. Discarding %d samples",
                    len(batch),
                )
                return
            if poll_id < self._committed_poll:
                self._report(
                    StaleResultError(
                        f"poll {poll_id} finished after poll {self._committed_poll}"
                    )
                )
                return
            if not batch:
                self._report(EmptyResultError("no heart rate samples returned"))
                return
            try:
                hrv = compute_variability(batch)
            except (EmptyResultError, InvalidSampleError) as exc:
                self._report(exc)
                return

            # Raw history is refreshed wholesale; HRV history accumulates.
            self._committed_poll = poll_id
            self._raw_store.replace_all(batch)
            self._hrv_store.append(hrv)
            self._publish(PollerState.ACTIVE, hrv)
        logger.info("HRV updated: %.2f ms (%d samples)", hrv.value, len(batch))

    def _on_fetch_failed(self, exc: Exception) -> None:
        with self._lock:
            if self._stop_requested:
                logger.info("Heart rate poller has been told to stop. Ignoring failed fetch")
                return
            if not isinstance(exc, HrvMonitorError):
                exc = SourceUnavailableError(f"sample source fetch failed: {exc}")
            self._report(exc)

    def _report(self, error: HrvMonitorError) -> None:
        if isinstance(error, EmptyResultError):
            logger.warning("No heart rate samples available: %s", error)
        elif isinstance(error, StaleResultError):
            logger.warning("Discarding out-of-date heart rate window: %s", error)
        else:
            logger.error("Heart rate poll failed: %s", error)
        try:
            self._failures.on_next(PollFailure(error=error))
        except Exception:
            logger.exception("Diagnostics subscriber raised while handling %s", error)

    def _publish(self, status: PollerState, latest_hrv: SampleItem | None) -> None:
        self._current = PollerSnapshot(status=status, latest_hrv=latest_hrv)
        # A failing subscriber must not turn a committed poll into a failed one.
        try:
            self._snapshots.on_next(self._current)
        except Exception:
            logger.exception("Snapshot subscriber raised on %s", self._current)

    def __repr__(self) -> str:
        return f"<HeartRatePoller(status={self.status})>"
