"""Central configuration for fresh_poller."""

from __future__ import annotations

import logging
import os

from .models.settings import Settings
from .segments import SECONDS_PER_HOUR

logger = logging.getLogger(__name__)


def _read_int(name: str, default: int, minimum: int = 0) -> int:
    """Read an integer environment variable.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset, empty or invalid.
        minimum: Smallest accepted value; anything lower falls back to default.

    Example:
        >>> os.environ["FRESH_WINDOW_S"] = "300"
        >>> _read_int("FRESH_WINDOW_S", 600, minimum=1)
        300
    """
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; using %s", name, raw, default)
        return default
    if value < minimum:
        logger.warning("%s=%s is below %s; using %s", name, value, minimum, default)
        return default
    return value


def _read_float(name: str, default: float) -> float:
    raw = (os.environ.get(name) or "").strip()
    try:
        value = float(raw) if raw else default
    except ValueError:
        logger.warning("Invalid %s=%r; using %s", name, raw, default)
        return default
    return value if value >= 0 else default


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Returns:
        Settings object with all configuration values.

    Note:
        Invalid or negative numeric values fall back to the defaults.
    """
    return Settings(
        WINDOW_S=_read_int("FRESH_WINDOW_S", 600, minimum=1),
        MAX_RETRIES=_read_int("FRESH_MAX_RETRIES", 20),
        RETRY_DELAY_S=_read_float("FRESH_RETRY_DELAY_S", 30.0),
        INITIAL_VALUE=_read_int("FRESH_INITIAL_VALUE", 0),
        FETCH_URL=os.environ.get("FRESH_FETCH_URL") or None,
        FETCH_FIELD=os.environ.get("FRESH_FETCH_FIELD") or None,
        FETCH_TIMEOUT_S=_read_float("FRESH_FETCH_TIMEOUT_S", 10.0),
    )


settings = _read_settings()


def validate_settings(current: Settings | None = None) -> list[str]:
    """Check the configuration and log a warning for each problem found.

    Returns the list of problems so callers (and tests) can inspect them.
    """
    current = current or settings
    problems: list[str] = []
    if current.FETCH_URL is None:
        problems.append("FRESH_FETCH_URL is not set; the host entrypoint cannot poll.")
    if SECONDS_PER_HOUR % current.WINDOW_S:
        problems.append(
            f"FRESH_WINDOW_S={current.WINDOW_S} does not divide an hour evenly; "
            "the last window of each hour will be short."
        )
    for problem in problems:
        logger.warning(problem)
    return problems


# Exported constants
WINDOW_S: int = settings.WINDOW_S
MAX_RETRIES: int = settings.MAX_RETRIES
RETRY_DELAY_S: float = settings.RETRY_DELAY_S
INITIAL_VALUE: int = settings.INITIAL_VALUE
FETCH_URL: str | None = settings.FETCH_URL
FETCH_FIELD: str | None = settings.FETCH_FIELD
FETCH_TIMEOUT_S: float = settings.FETCH_TIMEOUT_S
