import math
import os

DEFAULT_WINDOW_SIZE = 15
DEFAULT_RAW_STORE_CAPACITY = 60
DEFAULT_HRV_STORE_CAPACITY = 15

TRUE_FLAG_VALUES = {"true", "1", "yes", "on"}


def _env_flag(env_var: str, *, default: bool = False) -> bool:
    """Return the boolean value of ``env_var`` respecting common true strings."""

    value = os.environ.get(env_var)
    if value is None:
        return default
    return value.strip().lower() in TRUE_FLAG_VALUES


def _env_int(
    env_var: str, *, default: int, minimum: int | None = None
) -> int:
    """Return the integer value of ``env_var`` with optional bounds checking."""

    value = os.environ.get(env_var)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{env_var} must be an integer") from exc
    if minimum is not None and parsed < minimum:
        raise ValueError(f"{env_var} must be at least {minimum}")
    return parsed


def _env_optional_float(env_var: str) -> float | None:
    """Return the positive float value of ``env_var`` or ``None`` when unset."""

    value = os.environ.get(env_var)
    if value is None or value.strip() == "":
        return None
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ValueError(f"{env_var} must be a number") from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise ValueError(f"{env_var} must be a positive number")
    return parsed


class Configuration:
    @classmethod
    def window_size(cls) -> int:
        return _env_int("HRV_WINDOW_SIZE", default=DEFAULT_WINDOW_SIZE, minimum=1)

    @classmethod
    def raw_store_capacity(cls) -> int:
        return _env_int(
            "HRV_RAW_STORE_CAPACITY", default=DEFAULT_RAW_STORE_CAPACITY, minimum=1
        )

    @classmethod
    def hrv_store_capacity(cls) -> int:
        return _env_int(
            "HRV_STORE_CAPACITY", default=DEFAULT_HRV_STORE_CAPACITY, minimum=1
        )

    @classmethod
    def fetch_timeout_seconds(cls) -> float | None:
        return _env_optional_float("HRV_FETCH_TIMEOUT_SECONDS")

    @classmethod
    def reactivex_background_max_workers(cls) -> int:
        return _env_int("HRV_RX_BACKGROUND_MAX_WORKERS", default=2, minimum=1)

    @classmethod
    def log_to_file(cls) -> bool:
        return _env_flag("HRV_LOG_TO_FILE", default=True)
