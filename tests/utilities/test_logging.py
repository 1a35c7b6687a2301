import logging
from pathlib import Path

import pytest

from hrv_monitor.utilities.logging import get_logger


class TestGetLogger:
    def test_writes_rotating_file_in_configured_directory(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("HRV_LOG_DIR", str(tmp_path))
        logger = get_logger("hrv_monitor.tests.rotating")

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert (tmp_path / "hrv_monitor_tests_rotating.log").read_text().endswith("hello\n")

    def test_does_not_duplicate_handlers(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("HRV_LOG_DIR", str(tmp_path))
        first = get_logger("hrv_monitor.tests.repeat")
        count = len(first.handlers)

        second = get_logger("hrv_monitor.tests.repeat")

        assert second is first
        assert len(second.handlers) == count == 2

    def test_level_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("HRV_LOG_DIR", str(tmp_path))
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert get_logger("hrv_monitor.tests.level").level == logging.DEBUG

    def test_file_handler_can_be_disabled(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("HRV_LOG_DIR", str(tmp_path))
        monkeypatch.setenv("HRV_LOG_TO_FILE", "off")

        logger = get_logger("hrv_monitor.tests.console_only")
        logger.info("hello")

        assert [type(handler) for handler in logger.handlers] == [logging.StreamHandler]
        assert not (tmp_path / "hrv_monitor_tests_console_only.log").exists()

    def test_records_carry_thread_name(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("HRV_LOG_DIR", str(tmp_path))
        logger = get_logger("hrv_monitor.tests.threads")

        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert " - MainThread - INFO - hello" in (
            tmp_path / "hrv_monitor_tests_threads.log"
        ).read_text()
