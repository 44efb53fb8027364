"""Failure types of a fetch cycle.

Neither ever leaves a value stream: both are retried and, once the retry
budget is spent, resolved to the last cached value.
"""

from __future__ import annotations


class FreshnessError(Exception):
    """Base class for fetch-cycle failures."""


class StaleResult(FreshnessError):
    """The upstream answered, but with a reading from an earlier window."""

    def __init__(self, value: object, segment: int, current_segment: int) -> None:
        super().__init__(
            f"value {value!r} is in segment {segment}, wall clock is in segment {current_segment}"
        )
        self.value = value
        self.segment = segment
        self.current_segment = current_segment


class TransportFailure(FreshnessError):
    """The upstream could not be reached or returned an unusable payload."""
