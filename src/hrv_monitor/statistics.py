"""Interval and variability statistics over heart-rate batches."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from hrv_monitor.errors import EmptyBatchError, InvalidSampleError
from hrv_monitor.samples import SampleItem

MS_PER_MINUTE = 60_000.0


def intervals_ms(rates_bpm: Sequence[float]) -> np.ndarray:
    """Convert instantaneous rates in beats per minute to inter-beat intervals.

    Raises :class:`InvalidSampleError` when any rate is zero, negative or
    not finite. A single bad rate fails the whole batch.
    """

    array = np.asarray(rates_bpm, dtype=float)
    if array.size == 0:
        raise EmptyBatchError("cannot derive intervals from an empty batch")
    invalid = ~np.isfinite(array) | (array <= 0)
    if np.any(invalid):
        bad = array[invalid][0]
        raise InvalidSampleError(f"rate {bad!r} cannot be converted to an interval")
    return MS_PER_MINUTE / array


def population_std(values: Sequence[float] | np.ndarray) -> float:
    """Return the population standard deviation (``ddof=0``) of ``values``."""

    array = np.asarray(values, dtype=float)
    if array.size == 0:
        raise EmptyBatchError("values must contain at least one element")
    return float(np.std(array))


def compute_variability(batch: Sequence[SampleItem]) -> SampleItem:
    """Derive the HRV of a chronologically ordered batch of bpm samples.

    The result is the population standard deviation of the inter-beat
    intervals in milliseconds, stamped with the timestamp of the last
    sample in ``batch``.
    """

    if not batch:
        raise EmptyBatchError("cannot compute variability of an empty batch")
    intervals = intervals_ms([sample.value for sample in batch])
    return SampleItem(value=population_std(intervals), timestamp=batch[-1].timestamp)
