import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from hrv_monitor.utilities.env import Configuration

LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
LOG_DIR_ENV_VAR = "HRV_LOG_DIR"
DEFAULT_LOG_SUBDIR = Path(".hrv_monitor") / "logs"
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10 MiB
BACKUP_COUNT = 5
# Fetch results are committed on scheduler worker threads.
LOG_FORMAT = "%(asctime)s - %(name)s - %(threadName)s - %(levelname)s - %(message)s"


def log_directory() -> Path:
    """Return (and create) the directory that holds the rotating log files."""

    log_dir = os.getenv(LOG_DIR_ENV_VAR)
    path = Path(log_dir).expanduser() if log_dir else Path.home() / DEFAULT_LOG_SUBDIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def log_path(name: str) -> Path:
    """One file per top-level module path, e.g. ``hrv_monitor_poller.log``."""

    stem = name.replace(os.sep, ".").strip(".").replace(".", "_") or "root"
    return log_directory() / f"{stem}.log"


def _build_handlers(name: str) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if Configuration.log_to_file():
        handlers.append(
            RotatingFileHandler(
                log_path(name), maxBytes=MAX_LOG_BYTES, backupCount=BACKUP_COUNT
            )
        )
    return handlers


def get_logger(name: str) -> logging.Logger:
    """Return a logger with a stream handler and, unless ``HRV_LOG_TO_FILE``
    is off, a rotating file handler.

    Loggers that already carry handlers are only re-levelled.
    """

    level = getattr(logging, os.getenv(LOG_LEVEL_ENV_VAR, "INFO").upper(), logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in _build_handlers(name):
        handler.setFormatter(formatter)
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.propagate = False
    return logger
