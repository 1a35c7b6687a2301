"""Error taxonomy for the heart-rate polling pipeline."""


class HrvMonitorError(Exception):
    """Base class for errors raised while sampling or deriving HRV."""


class SourceUnavailableError(HrvMonitorError):
    """The sample source could not be queried at all."""


class EmptyResultError(HrvMonitorError):
    """A fetch succeeded but produced zero samples."""


class EmptyBatchError(EmptyResultError):
    """A variability statistic was requested for an empty batch."""


class InvalidSampleError(HrvMonitorError):
    """A sample carries a rate that cannot be converted to an interval."""


class StaleResultError(HrvMonitorError):
    """A fetch completed after a later poll had already been committed."""
