import pytest

from fresh_poller.segments import (
    SECONDS_PER_HOUR,
    current_segment,
    segment_and_remainder,
)


@pytest.mark.parametrize(
    "now, expected",
    [
        (0, (0, 0)),
        (355.55, (0, 245)),
        (599.99, (0, 1)),
        (600, (1, 0)),
        (601, (1, 599)),
        (3599, (5, 1)),
        (3600, (0, 0)),
        (2 * SECONDS_PER_HOUR + 1805, (3, 595)),
    ],
)
def test_segment_and_remainder(now, expected):
    assert tuple(segment_and_remainder(now, 600)) == expected


def test_fractional_seconds_are_truncated():
    position = segment_and_remainder(1_674_300_355.55, 600)
    assert position.seconds_to_boundary == 600 - 355


@pytest.mark.parametrize("window_s", [60, 300, 600, 900, 1800])
def test_segment_stays_inside_the_hour(window_s):
    limit = SECONDS_PER_HOUR // window_s
    for now in range(0, 2 * SECONDS_PER_HOUR, 7):
        segment, remainder = segment_and_remainder(now, window_s)
        assert 0 <= segment < limit
        assert 0 <= remainder < window_s
        if remainder:
            assert (now + remainder) % window_s == 0


def test_current_segment():
    assert current_segment(1799, 600) == 2
    assert current_segment(1800, 600) == 3


@pytest.mark.parametrize("window_s", [0, -600])
def test_non_positive_window_rejected(window_s):
    with pytest.raises(ValueError):
        segment_and_remainder(0, window_s)
