import tempfile
from typing import Callable

import pytest
from hypothesis import HealthCheck, settings
from reactivex.scheduler import ImmediateScheduler

from tests.helpers import samples_from

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")


def pytest_configure(config: pytest.Config) -> None:
    """Keep rotating log files out of the home directory during test runs."""

    patcher = pytest.MonkeyPatch()
    patcher.setenv("HRV_LOG_DIR", tempfile.mkdtemp(prefix="hrv-monitor-logs-"))
    config.add_cleanup(patcher.undo)


@pytest.fixture(autouse=True)
def clear_hrv_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "HRV_WINDOW_SIZE",
        "HRV_RAW_STORE_CAPACITY",
        "HRV_STORE_CAPACITY",
        "HRV_FETCH_TIMEOUT_SECONDS",
        "HRV_RX_BACKGROUND_MAX_WORKERS",
        "HRV_LOG_TO_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def immediate_scheduler() -> ImmediateScheduler:
    """Run fetches synchronously so poll results are committed before assertions."""

    return ImmediateScheduler()


@pytest.fixture
def make_samples() -> Callable[..., list]:
    return samples_from
