"""Configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Settings:
    """Configuration settings for fresh_poller."""

    WINDOW_S: int
    MAX_RETRIES: int
    RETRY_DELAY_S: float
    INITIAL_VALUE: int
    FETCH_URL: str | None
    FETCH_FIELD: str | None
    FETCH_TIMEOUT_S: float
