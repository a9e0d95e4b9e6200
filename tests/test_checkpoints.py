"""Tests for the static checkpoint tables."""

import pytest

from bucketry import InvalidArgument
from bucketry.checkpoints import (
    NUMBER_CHECKPOINTS,
    NUMBER_COARSE_CHECKPOINTS,
    NUMBER_HELPER,
    SUPPORTED_TIME_GRANULARITIES,
    TIME_CHECKPOINTS,
    TIME_COARSE_CHECKPOINTS,
    TIME_HELPER,
    Checkpoint,
    days,
    helper_for_kind,
    hours,
    minutes,
)


def table(checkpoints: tuple[Checkpoint, ...]) -> list[tuple[float, str]]:
    return [(c.threshold, str(c.candidate)) for c in checkpoints]


@pytest.mark.parametrize(
    "checkpoints",
    [TIME_CHECKPOINTS, TIME_COARSE_CHECKPOINTS, NUMBER_CHECKPOINTS, NUMBER_COARSE_CHECKPOINTS],
)
def test_thresholds_are_strictly_descending(checkpoints: tuple[Checkpoint, ...]):
    thresholds = [c.threshold for c in checkpoints]

    assert all(a > b for a, b in zip(thresholds, thresholds[1:]))


def test_time_tables():
    assert table(TIME_CHECKPOINTS) == [
        (days(95), "P1W"),
        (days(8), "P1D"),
        (hours(8), "PT1H"),
        (hours(3), "PT5M"),
    ]
    assert table(TIME_COARSE_CHECKPOINTS) == [
        (days(95), "P1M"),
        (days(20), "P1W"),
        (days(6), "P1D"),
        (days(2), "PT12H"),
        (hours(23), "PT6H"),
        (hours(3), "PT1H"),
        (minutes(30), "PT5M"),
    ]
    assert str(TIME_HELPER.min_granularity) == "PT1M"
    assert str(TIME_HELPER.default_granularity) == "P1D"


def test_number_tables():
    assert table(NUMBER_CHECKPOINTS) == [
        (5000, "1000"),
        (500, "100"),
        (100, "10"),
        (1, "1"),
        (0.1, "0.1"),
    ]
    assert table(NUMBER_COARSE_CHECKPOINTS) == [
        (500000, "50000"),
        (50000, "10000"),
        (5000, "5000"),
        (1000, "1000"),
        (100, "100"),
        (10, "10"),
        (1, "1"),
        (0.1, "0.1"),
    ]
    assert str(NUMBER_HELPER.min_granularity) == "1"
    assert str(NUMBER_HELPER.default_granularity) == "10"


def test_supported_time_ladder_is_strictly_ascending():
    sizes = [b.canonical_size for b in SUPPORTED_TIME_GRANULARITIES]

    assert len(sizes) == 15
    assert all(a < b for a, b in zip(sizes, sizes[1:]))


def test_number_has_no_coarse_menu():
    """Coarse number menus fall back to the default one."""
    assert NUMBER_HELPER.menu_for(coarse=True) == NUMBER_HELPER.default_menu
    assert NUMBER_HELPER.checkpoints_for(coarse=True) == NUMBER_COARSE_CHECKPOINTS


def test_helper_for_unknown_kind():
    with pytest.raises(InvalidArgument, match="Unknown dimension kind"):
        helper_for_kind("string")  # type: ignore[arg-type]
