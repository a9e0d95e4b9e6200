"""Round-number bucket sizes scaled to the magnitude of a value.

Sizes follow the 1-5-10 ladder (..., 0.5, 1, 5, 10, 50, 100, ...) and are
rounded to as many significant digits as the center value has whole digits.
"""

import math

from bucketry.bucket import NumberBucket
from bucketry.errors import InvalidArgument


def whole_digits(value: float) -> int:
    """Number of digits before the decimal point, at least 1."""
    if value == 0:
        return 1
    return max(math.floor(math.log10(abs(value))), 0) + 1


def round_to_significant_digits(value: float, digits: int) -> float:
    if value == 0:
        return 0.0
    magnitude = math.floor(math.log10(abs(value)))
    return round(value, digits - 1 - magnitude)


def synthesize_number_buckets(
    center: float, count: int, coarse: bool = False
) -> tuple[NumberBucket, ...]:
    """Return ``count`` ascending buckets starting around ``center``'s magnitude.

    Starting at ``10 ** floor(log10(center))``, each decade contributes a
    half step (``5 * 10 ** (k - 1)``, skipped when ``coarse``) and a whole
    step (``10 ** k``). Steps past the largest float are not emitted, so
    centers near that limit yield fewer than ``count`` buckets.

    Example:
        >>> [b.size for b in synthesize_number_buckets(100, 4)]
        [50.0, 100.0, 500.0, 1000.0]
    """
    if not center > 0 or not math.isfinite(center):
        raise InvalidArgument(f"center must be a finite positive number, got {center!r}")
    if count < 0:
        raise InvalidArgument(f"count must be non-negative, got {count}")

    digits = whole_digits(center)
    exponent = math.floor(math.log10(center))
    sizes: list[float] = []

    while len(sizes) < count:
        if not coarse:
            half_step = _step(5, exponent - 1)
            if half_step is None:
                break
            sizes.append(round_to_significant_digits(half_step, digits))
            if len(sizes) >= count:
                break
        whole_step = _step(1, exponent)
        if whole_step is None:
            break
        sizes.append(round_to_significant_digits(whole_step, digits))
        exponent += 1

    return tuple(NumberBucket(size) for size in sizes)


def _step(mantissa: int, exponent: int) -> float | None:
    """``mantissa * 10 ** exponent``, or None once it leaves the float range."""
    value = float(f"{mantissa}e{exponent}")
    if math.isinf(value):
        return None
    return value
