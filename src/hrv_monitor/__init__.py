"""Heart-rate sampling and HRV aggregation."""

from hrv_monitor.errors import (EmptyBatchError,  # noqa: F401
                                EmptyResultError, HrvMonitorError,
                                InvalidSampleError, SourceUnavailableError,
                                StaleResultError)
from hrv_monitor.poller import (HeartRatePoller, PollerSnapshot,  # noqa: F401
                                PollerState, PollFailure)
from hrv_monitor.rolling_store import RollingStore  # noqa: F401
from hrv_monitor.samples import SampleItem  # noqa: F401
from hrv_monitor.scheduling import poll_every  # noqa: F401
from hrv_monitor.sources import (RecordingSampleSource,  # noqa: F401
                                 SampleSource, SimulatedHeartRateSource)
from hrv_monitor.statistics import (compute_variability,  # noqa: F401
                                    intervals_ms, population_std)
