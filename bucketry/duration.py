"""ISO 8601 calendar durations usable as grouping units for timestamps.

A duration keeps its calendar representation: ``P1W`` and ``P7D`` have the
same canonical length but are different durations. Calendar arithmetic is
delegated to python-dateutil's ``relativedelta``.
"""

import re
from dataclasses import astuple, dataclass, fields
from datetime import datetime
from typing import Literal, TypeAlias
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from bucketry.util import DAY, HOUR, MINUTE, MONTH, SECOND, WEEK, YEAR

Span: TypeAlias = Literal[
    "year", "month", "week", "day", "hour", "minute", "second"
]

_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<year>\d+)Y)?(?:(?P<month>\d+)M)?(?:(?P<week>\d+)W)?(?:(?P<day>\d+)D)?"
    r"(?:T(?=\d)(?:(?P<hour>\d+)H)?(?:(?P<minute>\d+)M)?(?:(?P<second>\d+)S)?)?$"
)

_CANONICAL_LENGTH: dict[Span, int] = {
    "year": YEAR,
    "month": MONTH,
    "week": WEEK,
    "day": DAY,
    "hour": HOUR,
    "minute": MINUTE,
    "second": SECOND,
}

# Cycle a span repeats within; a count floors cleanly only if it divides it.
# Spans without a cycle floor cleanly only with a count of 1.
_CYCLE: dict[Span, int] = {
    "second": 60,
    "minute": 60,
    "hour": 24,
    "month": 12,
}

_DATE_DESIGNATORS: dict[Span, str] = {"year": "Y", "month": "M", "week": "W", "day": "D"}
_TIME_DESIGNATORS: dict[Span, str] = {"hour": "H", "minute": "M", "second": "S"}


@dataclass(frozen=True, kw_only=True)
class Duration:
    year: int = 0
    month: int = 0
    week: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0

    def __post_init__(self) -> None:
        if any(count < 0 for count in astuple(self)):
            raise ValueError(f"Duration spans must be non-negative, got {self!r}")

    @classmethod
    def from_iso(cls, text: str) -> "Duration":
        """Parse an ISO 8601 duration such as ``P1W`` or ``PT15M``.

        Raises:
            ValueError: If the text is not a duration or describes zero time
        """
        match = _DURATION_PATTERN.match(text)
        if match is None:
            raise ValueError(
                f"Invalid ISO 8601 duration: {text!r}\n"
                f"Examples: 'PT1M', 'PT6H', 'P1D', 'P1W', 'P3M', 'P1Y'"
            )
        spans = {span: int(count) for span, count in match.groupdict().items() if count}
        duration = cls(**spans)
        if not duration.spans:
            raise ValueError(f"Duration must not be empty, got {text!r}")
        return duration

    @property
    def spans(self) -> dict[Span, int]:
        """Non-zero spans, largest unit first."""
        return {
            field.name: getattr(self, field.name)  # type: ignore[misc]
            for field in fields(self)
            if getattr(self, field.name)
        }

    @property
    def single_span(self) -> Span | None:
        spans = self.spans
        if len(spans) != 1:
            return None
        return next(iter(spans))

    @property
    def canonical_length(self) -> int:
        """Length in milliseconds, with months of 30 days and years of 365."""
        return sum(_CANONICAL_LENGTH[span] * count for span, count in self.spans.items())

    def is_floorable(self) -> bool:
        """True if timestamps can be floored to a multiple of this duration.

        Only single-span durations qualify. Counts must divide the span's
        cycle (seconds and minutes within 60, hours within 24, months within
        12); days and weeks only floor cleanly one at a time. Years floor to
        multiples of the calendar year for any count.
        """
        span = self.single_span
        if span is None:
            return False
        count = self.spans[span]
        if count == 1 or span == "year":
            return True
        cycle = _CYCLE.get(span)
        return cycle is not None and cycle % count == 0

    def floor(self, value: datetime, tz: str = "UTC") -> datetime:
        """Return the start of the period containing ``value`` in ``tz``.

        Weeks start on Monday. The result is expressed in ``tz``.

        Raises:
            TypeError: If ``value`` is a naive datetime
            ValueError: If this duration is not floorable
        """
        _require_aware(value)
        if not self.is_floorable():
            raise ValueError(f"Duration {self} cannot be floored")

        span = self.single_span
        count = self.spans[span]  # type: ignore[index]
        local = value.astimezone(ZoneInfo(tz))

        if span == "second":
            return local.replace(second=local.second - local.second % count, microsecond=0)
        if span == "minute":
            return local.replace(
                minute=local.minute - local.minute % count, second=0, microsecond=0
            )
        if span == "hour":
            return local.replace(
                hour=local.hour - local.hour % count, minute=0, second=0, microsecond=0
            )

        midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
        if span == "day":
            return midnight
        if span == "week":
            return midnight - relativedelta(days=midnight.weekday())
        if span == "month":
            return midnight.replace(day=1, month=local.month - (local.month - 1) % count)
        return midnight.replace(day=1, month=1, year=local.year - local.year % count)

    def shift(self, value: datetime, tz: str = "UTC", step: int = 1) -> datetime:
        """Move ``value`` by ``step`` multiples of this duration in wall-clock time."""
        _require_aware(value)
        delta = relativedelta(
            years=self.year * step,
            months=self.month * step,
            weeks=self.week * step,
            days=self.day * step,
            hours=self.hour * step,
            minutes=self.minute * step,
            seconds=self.second * step,
        )
        return value.astimezone(ZoneInfo(tz)) + delta

    def __str__(self) -> str:
        spans = self.spans
        text = "P" + "".join(
            f"{spans[span]}{designator}"
            for span, designator in _DATE_DESIGNATORS.items()
            if span in spans
        )
        clock = "".join(
            f"{spans[span]}{designator}"
            for span, designator in _TIME_DESIGNATORS.items()
            if span in spans
        )
        return f"{text}T{clock}" if clock else text


def is_valid_duration(text: str) -> bool:
    try:
        Duration.from_iso(text)
    except ValueError:
        return False
    return True


def is_floorable_duration(text: str) -> bool:
    try:
        return Duration.from_iso(text).is_floorable()
    except ValueError:
        return False


def _require_aware(value: datetime) -> None:
    if value.tzinfo is None:
        raise TypeError(
            f"Expected a timezone-aware datetime.\n"
            f"Got naive datetime: {value!r}\n"
            f"Hint: Add timezone info:\n"
            f"  dt = datetime(..., tzinfo=timezone.utc)"
        )
