from hrv_monitor.sources.base import SampleSource  # noqa: F401
from hrv_monitor.sources.recording import RecordingSampleSource  # noqa: F401
from hrv_monitor.sources.simulated import (  # noqa: F401
    RECORDED_RAMP_BPM, SimulatedHeartRateSource)
