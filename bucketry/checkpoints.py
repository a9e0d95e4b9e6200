"""Checkpoint tables and per-kind bucketing constants.

A checkpoint table maps range lengths to bucket candidates: the first
checkpoint whose threshold the range exceeds picks the candidate. Tables are
ordered by descending threshold. Fine tables produce denser charts, coarse
tables sparser ones.
"""

from collections.abc import Callable
from dataclasses import dataclass

from bucketry.bucket import Bucket, NumberBucket, TimeBucket
from bucketry.errors import InvalidArgument
from bucketry.numeric import synthesize_number_buckets
from bucketry.range import Range
from bucketry.util import ANCHORED_NUMBER_COUNT, DAY, HOUR, MENU_LENGTH, MINUTE, Kind


@dataclass(frozen=True)
class Checkpoint:
    threshold: float
    candidate: Bucket


@dataclass(frozen=True, kw_only=True)
class BucketingHelper:
    """Everything the resolver and menu generator need to know about a kind."""

    kind: Kind
    min_granularity: Bucket
    default_granularity: Bucket
    checkpoints: tuple[Checkpoint, ...]
    coarse_checkpoints: tuple[Checkpoint, ...] | None
    default_menu: tuple[Bucket, ...]
    coarse_menu: tuple[Bucket, ...] | None
    supported_granularities: Callable[[Bucket], tuple[Bucket, ...]]

    def checkpoints_for(self, coarse: bool) -> tuple[Checkpoint, ...]:
        if coarse and self.coarse_checkpoints is not None:
            return self.coarse_checkpoints
        return self.checkpoints

    def menu_for(self, coarse: bool) -> tuple[Bucket, ...]:
        if coarse and self.coarse_menu is not None:
            return self.coarse_menu
        return self.default_menu


def minutes(count: float) -> float:
    """Threshold length of ``count`` minutes, in milliseconds."""
    return count * MINUTE


def hours(count: float) -> float:
    return count * HOUR


def days(count: float) -> float:
    return count * DAY


def _table(*checkpoints: Checkpoint) -> tuple[Checkpoint, ...]:
    for previous, current in zip(checkpoints, checkpoints[1:]):
        if current.threshold >= previous.threshold:
            raise ValueError(
                f"Checkpoint thresholds must be strictly descending, "
                f"got {previous.threshold} then {current.threshold}"
            )
    return checkpoints


def _ascending_candidates(
    table: tuple[Checkpoint, ...], *floor: Bucket
) -> tuple[Bucket, ...]:
    return tuple(reversed([checkpoint.candidate for checkpoint in table] + list(floor)))


def _time(text: str) -> TimeBucket:
    return TimeBucket.from_iso(text)


def _number(size: float) -> NumberBucket:
    return NumberBucket(size)


TIME_CHECKPOINTS = _table(
    Checkpoint(days(95), _time("P1W")),
    Checkpoint(days(8), _time("P1D")),
    Checkpoint(hours(8), _time("PT1H")),
    Checkpoint(hours(3), _time("PT5M")),
)

TIME_COARSE_CHECKPOINTS = _table(
    Checkpoint(days(95), _time("P1M")),
    Checkpoint(days(20), _time("P1W")),
    Checkpoint(days(6), _time("P1D")),
    Checkpoint(days(2), _time("PT12H")),
    Checkpoint(hours(23), _time("PT6H")),
    Checkpoint(hours(3), _time("PT1H")),
    Checkpoint(minutes(30), _time("PT5M")),
)

TIME_MIN_GRANULARITY = _time("PT1M")

# Ladder the time menu and anchored resolution choose from
SUPPORTED_TIME_GRANULARITIES: tuple[TimeBucket, ...] = tuple(
    _time(text)
    for text in (
        "PT1S", "PT1M", "PT5M", "PT15M",
        "PT1H", "PT6H", "PT8H", "PT12H",
        "P1D", "P1W", "P1M", "P3M", "P6M",
        "P1Y", "P2Y",
    )
)

NUMBER_CHECKPOINTS = _table(
    Checkpoint(5000, _number(1000)),
    Checkpoint(500, _number(100)),
    Checkpoint(100, _number(10)),
    Checkpoint(1, _number(1)),
    Checkpoint(0.1, _number(0.1)),
)

NUMBER_COARSE_CHECKPOINTS = _table(
    Checkpoint(500000, _number(50000)),
    Checkpoint(50000, _number(10000)),
    Checkpoint(5000, _number(5000)),
    Checkpoint(1000, _number(1000)),
    Checkpoint(100, _number(100)),
    Checkpoint(10, _number(10)),
    Checkpoint(1, _number(1)),
    Checkpoint(0.1, _number(0.1)),
)


def _supported_numbers(anchor: Bucket) -> tuple[Bucket, ...]:
    return synthesize_number_buckets(anchor.canonical_size, ANCHORED_NUMBER_COUNT)


TIME_HELPER = BucketingHelper(
    kind="time",
    min_granularity=TIME_MIN_GRANULARITY,
    default_granularity=_time("P1D"),
    checkpoints=TIME_CHECKPOINTS,
    coarse_checkpoints=TIME_COARSE_CHECKPOINTS,
    default_menu=_ascending_candidates(TIME_CHECKPOINTS, TIME_MIN_GRANULARITY),
    # The coarse table has more candidates than a menu holds; keep the coarsest.
    coarse_menu=_ascending_candidates(TIME_COARSE_CHECKPOINTS, TIME_MIN_GRANULARITY)[
        -MENU_LENGTH:
    ],
    supported_granularities=lambda _: SUPPORTED_TIME_GRANULARITIES,
)

NUMBER_HELPER = BucketingHelper(
    kind="number",
    min_granularity=_number(1),
    default_granularity=_number(10),
    checkpoints=NUMBER_CHECKPOINTS,
    coarse_checkpoints=NUMBER_COARSE_CHECKPOINTS,
    default_menu=_ascending_candidates(NUMBER_CHECKPOINTS),
    coarse_menu=None,
    supported_granularities=_supported_numbers,
)

_HELPERS: dict[str, BucketingHelper] = {
    "time": TIME_HELPER,
    "number": NUMBER_HELPER,
}


def helper_for_kind(kind: Kind) -> BucketingHelper:
    try:
        return _HELPERS[kind]
    except KeyError:
        valid = ", ".join(_HELPERS)
        raise InvalidArgument(f"Unknown dimension kind {kind!r}. Valid kinds: {valid}") from None


def helper_for_range(range: Range) -> BucketingHelper:
    return _HELPERS[range.kind]
