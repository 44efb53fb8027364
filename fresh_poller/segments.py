"""Wall-clock segmentation of the hour into fixed-size windows."""

from __future__ import annotations

from typing import NamedTuple

SECONDS_PER_HOUR = 60 * 60


class SegmentPosition(NamedTuple):
    segment: int
    seconds_to_boundary: int


def validate_window(window_s: int) -> None:
    if window_s <= 0:
        raise ValueError(f"window size must be positive, got {window_s}")


def segment_and_remainder(now: float, window_s: int) -> SegmentPosition:
    """Locate ``now`` (epoch seconds) inside the current hour.

    Fractional seconds are truncated before any arithmetic, so 355.55 is
    treated as 355. ``seconds_to_boundary`` is 0 when ``now`` sits exactly
    on a window boundary, otherwise the whole seconds left until the next one.

    Example:
        >>> segment_and_remainder(355.55, 600)
        SegmentPosition(segment=0, seconds_to_boundary=245)
        >>> segment_and_remainder(1200, 600)
        SegmentPosition(segment=2, seconds_to_boundary=0)
    """
    validate_window(window_s)
    elapsed = int(now) % SECONDS_PER_HOUR
    offset = elapsed % window_s
    return SegmentPosition(
        segment=elapsed // window_s,
        seconds_to_boundary=window_s - offset if offset else 0,
    )


def current_segment(now: float, window_s: int) -> int:
    return segment_and_remainder(now, window_s).segment


__all__ = [
    "SECONDS_PER_HOUR",
    "SegmentPosition",
    "current_segment",
    "segment_and_remainder",
    "validate_window",
]
