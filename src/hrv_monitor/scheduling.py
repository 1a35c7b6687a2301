from __future__ import annotations

from datetime import timedelta

import reactivex
from reactivex.abc import DisposableBase, SchedulerBase

from hrv_monitor.poller import HeartRatePoller
from hrv_monitor.utilities.logging import get_logger

logger = get_logger(__name__)


def poll_every(
    poller: HeartRatePoller,
    interval: timedelta | float,
    *,
    scheduler: SchedulerBase | None = None,
) -> DisposableBase:
    """Trigger ``poller.poll()`` once per ``interval`` until disposed.

    ``interval`` is a :class:`~datetime.timedelta` or a number of seconds.
    """

    period = interval if isinstance(interval, timedelta) else timedelta(seconds=interval)
    if period <= timedelta(0):
        raise ValueError("interval must be positive")

    def _tick(tick: int) -> None:
        logger.debug("Poll tick %d", tick)
        poller.poll()

    return reactivex.interval(period, scheduler=scheduler).subscribe(
        on_next=_tick,
        on_error=lambda exc: logger.error("Poll timer failed: %s", exc),
    )
