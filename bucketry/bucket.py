"""Number and time buckets: the units continuous values are grouped by."""

import math
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_FLOOR, Decimal
from numbers import Real
from typing import Any

from typing_extensions import override

from bucketry.duration import Duration
from bucketry.errors import InvalidArgument, InvalidBucketInput
from bucketry.range import Range
from bucketry.util import MENU_LENGTH, Kind


class Bucket(ABC):
    """Immutable grouping unit for a continuous dimension.

    Buckets are compared structurally with ``==`` and ordered by
    ``canonical_size``, which is the value checkpoints and menus work on.
    """

    @property
    @abstractmethod
    def kind(self) -> Kind:
        pass

    @property
    @abstractmethod
    def canonical_size(self) -> float:
        pass

    @abstractmethod
    def floor(self, value: Any) -> Any:
        """Return the start of the bucket containing ``value``."""
        pass

    @abstractmethod
    def range_of(self, value: Any) -> Range:
        """Return the bucket containing ``value`` as a half-open range."""
        pass


@dataclass(frozen=True)
class NumberBucket(Bucket):
    size: float

    def __post_init__(self) -> None:
        if (
            not isinstance(self.size, Real)
            or isinstance(self.size, bool)
            or not _is_finite(self.size)
            or self.size <= 0
        ):
            raise ValueError(
                f"NumberBucket size must be a finite positive number, got {self.size!r}"
            )

    @property
    @override
    def kind(self) -> Kind:
        return "number"

    @property
    @override
    def canonical_size(self) -> float:
        return self.size

    @override
    def floor(self, value: float) -> float:
        return float(self._index_of(value) * _decimal(self.size))

    @override
    def range_of(self, value: float) -> Range:
        index = self._index_of(value)
        size = _decimal(self.size)
        return Range(start=float(index * size), end=float((index + 1) * size))

    def _index_of(self, value: float) -> Decimal:
        # Decimal keeps 0.3 / 0.1 at exactly 3
        return (_decimal(value) / _decimal(self.size)).to_integral_value(
            rounding=ROUND_FLOOR
        )

    def __str__(self) -> str:
        if float(self.size).is_integer():
            return str(int(self.size))
        return repr(float(self.size))


@dataclass(frozen=True)
class TimeBucket(Bucket):
    duration: Duration

    def __post_init__(self) -> None:
        if not self.duration.is_floorable():
            raise ValueError(
                f"TimeBucket duration must be floorable, got {self.duration}.\n"
                f"Hint: use a single unit that divides its cycle, "
                f"e.g. 'PT15M', 'PT6H', 'P1D', 'P1W', 'P3M'"
            )

    @classmethod
    def from_iso(cls, text: str) -> "TimeBucket":
        return cls(Duration.from_iso(text))

    @property
    @override
    def kind(self) -> Kind:
        return "time"

    @property
    @override
    def canonical_size(self) -> float:
        return self.duration.canonical_length

    @override
    def floor(self, value: datetime, tz: str = "UTC") -> datetime:
        return self.duration.floor(value, tz)

    @override
    def range_of(self, value: datetime, tz: str = "UTC") -> Range:
        start = self.duration.floor(value, tz)
        return Range(start=start, end=self.duration.shift(start, tz))

    def __str__(self) -> str:
        return str(self.duration)


def parse_bucket(value: Any) -> Bucket:
    """Build a bucket from a number, a numeric string, or an ISO 8601 duration.

    Raises:
        InvalidBucketInput: If the value is neither a finite positive number
            nor a floorable duration string
    """
    if isinstance(value, Real) and not isinstance(value, bool):
        return _number_bucket(value, value)
    if isinstance(value, str):
        try:
            size = float(value)
        except ValueError:
            return _time_bucket(value)
        return _number_bucket(size, value)
    raise InvalidBucketInput(
        f"Bucket input must be number or duration.\n"
        f"Got {type(value).__name__!r}: {value!r}"
    )


def parse_granularities(values: Iterable[Any]) -> tuple[Bucket, ...]:
    """Parse a dimension's custom granularity list.

    Raises:
        InvalidBucketInput: If any entry cannot be parsed
        InvalidArgument: If the list does not hold exactly five entries of one kind
    """
    buckets = tuple(parse_bucket(value) for value in values)
    if len(buckets) != MENU_LENGTH:
        raise InvalidArgument(
            f"Custom granularities must list exactly {MENU_LENGTH} entries, "
            f"got {len(buckets)}"
        )
    kinds = {bucket.kind for bucket in buckets}
    if len(kinds) > 1:
        raise InvalidArgument(
            f"Custom granularities must all be of the same kind, "
            f"got {', '.join(sorted(kinds))}"
        )
    return buckets


def canonical_size(bucket: Bucket) -> float:
    return bucket.canonical_size


def _is_finite(value: Real) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        # Integers too large for a float
        return False


def _decimal(value: float) -> Decimal:
    return Decimal(repr(value))


def _number_bucket(size: float, raw: Any) -> NumberBucket:
    try:
        return NumberBucket(size)
    except ValueError as exc:
        raise InvalidBucketInput(
            f"Bucket input must be number or duration.\n"
            f"Got {raw!r}: numbers must be finite and positive"
        ) from exc


def _time_bucket(text: str) -> TimeBucket:
    try:
        duration = Duration.from_iso(text)
    except ValueError as exc:
        raise InvalidBucketInput(
            f"Bucket input must be number or duration.\n"
            f"Got {text!r}\n"
            f"Examples: 5, 0.1, 'PT1M', 'PT6H', 'P1D', 'P1W'"
        ) from exc
    if not duration.is_floorable():
        raise InvalidBucketInput(
            f"Duration {text!r} cannot be used as a bucket: it has no calendar floor.\n"
            f"Hint: use a single unit that divides its cycle, e.g. 'PT15M' or 'P3M'"
        )
    return TimeBucket(duration)
