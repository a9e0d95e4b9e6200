from dataclasses import dataclass
from datetime import datetime
from numbers import Real

from bucketry.util import Kind


@dataclass(frozen=True, kw_only=True)
class Range:
    """Half-open ``[start, end)`` span of numbers or timezone-aware datetimes."""

    start: float | datetime
    end: float | datetime

    def __post_init__(self) -> None:
        start_kind = _boundary_kind(self.start, "start")
        end_kind = _boundary_kind(self.end, "end")
        if start_kind != end_kind:
            raise TypeError(
                f"Range boundaries must be of the same kind.\n"
                f"Got start={self.start!r} ({start_kind}), end={self.end!r} ({end_kind})"
            )

    @property
    def kind(self) -> Kind:
        return _boundary_kind(self.start, "start")

    @property
    def length(self) -> float:
        """Absolute length in canonical units (milliseconds for time)."""
        return abs(_canonical(self.end) - _canonical(self.start))

    def __contains__(self, value: float | datetime) -> bool:
        return self.start <= value < self.end  # type: ignore[operator]

    def __str__(self) -> str:
        return f"Range({self.start}→{self.end})"


def _canonical(boundary: float | datetime) -> float:
    if isinstance(boundary, datetime):
        return boundary.timestamp() * 1000
    return float(boundary)


def _boundary_kind(boundary: object, edge: str) -> Kind:
    if isinstance(boundary, datetime):
        if boundary.tzinfo is None:
            raise TypeError(
                f"Range {edge} must be a timezone-aware datetime.\n"
                f"Got naive datetime: {boundary!r}\n"
                f"Hint: Add timezone info:\n"
                f"  from zoneinfo import ZoneInfo\n"
                f"  dt = datetime(..., tzinfo=ZoneInfo('UTC'))  "
                f"# or 'US/Pacific', etc.\n"
                f"  # Or use timezone.utc for UTC:\n"
                f"  dt = datetime(..., tzinfo=timezone.utc)"
            )
        return "time"
    if isinstance(boundary, Real) and not isinstance(boundary, bool):
        return "number"
    raise TypeError(
        f"Range {edge} must be a number or a datetime.\n"
        f"Got {type(boundary).__name__!r}: {boundary!r}"
    )
