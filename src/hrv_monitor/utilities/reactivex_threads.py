from __future__ import annotations

from dataclasses import dataclass
from threading import Lock

from reactivex.scheduler import ThreadPoolScheduler

from hrv_monitor.utilities.env import Configuration
from hrv_monitor.utilities.logging import get_logger

logger = get_logger(__name__)


@dataclass
class _SchedulerState:
    lock: Lock
    scheduler: ThreadPoolScheduler | None = None


_BACKGROUND_SCHEDULER = _SchedulerState(lock=Lock())


def background_scheduler(max_workers: int | None = None) -> ThreadPoolScheduler:
    """Return the shared scheduler that runs sample-source fetches."""

    state = _BACKGROUND_SCHEDULER
    if state.scheduler is None:
        with state.lock:
            if state.scheduler is None:
                resolved_workers = (
                    max_workers
                    if max_workers is not None
                    else Configuration.reactivex_background_max_workers()
                )
                logger.debug("Building scheduler with %d workers", resolved_workers)
                state.scheduler = ThreadPoolScheduler(max_workers=resolved_workers)
    assert state.scheduler is not None
    return state.scheduler
