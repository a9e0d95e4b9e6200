"""Granularity menus and best-bucket resolution for continuous dimensions.

The resolver walks a checkpoint table from the largest threshold down and
stops at the first checkpoint the range (or the anchor) exceeds. Without an
anchor the checkpoint's candidate wins, optionally snapped onto a custom
granularity list. With an anchor, the data is already aggregated to that
bucket, so nothing finer than the anchor is ever proposed.
"""

import logging
import re
from collections.abc import Sequence

from bucketry.bucket import Bucket
from bucketry.checkpoints import BucketingHelper, helper_for_kind, helper_for_range
from bucketry.duration import is_floorable_duration, is_valid_duration
from bucketry.errors import InvalidArgument
from bucketry.range import Range
from bucketry.util import MENU_LENGTH, Kind

logger = logging.getLogger(__name__)

INVALID_DURATION_FORMAT = "Invalid duration format"
NOT_FLOORABLE_DURATION = "Duration cannot be floored"
INVALID_NUMBER_FORMAT = "Invalid number format"

_DECIMAL_INTEGER = re.compile(r"[0-9]+")


def find_exact_index(buckets: Sequence[Bucket], target: Bucket) -> int:
    size = target.canonical_size
    for index, bucket in enumerate(buckets):
        if bucket.canonical_size == size:
            return index
    return -1


def find_first_bigger_index(buckets: Sequence[Bucket], target: Bucket) -> int:
    size = target.canonical_size
    for index, bucket in enumerate(buckets):
        if bucket.canonical_size > size:
            return index
    return -1


def find_min_value_index(buckets: Sequence[Bucket]) -> int:
    return min(range(len(buckets)), key=lambda index: buckets[index].canonical_size)


def find_max_value_index(buckets: Sequence[Bucket]) -> int:
    return max(range(len(buckets)), key=lambda index: buckets[index].canonical_size)


def find_bigger_closest_to_ideal(
    buckets: Sequence[Bucket], minimum: Bucket, ideal: Bucket
) -> Bucket | None:
    """Return the smallest bucket at least as big as both ``minimum`` and ``ideal``.

    Returns None when every bucket is smaller than one of them.
    """
    floor = max(minimum.canonical_size, ideal.canonical_size)
    eligible = [bucket for bucket in buckets if bucket.canonical_size >= floor]
    if not eligible:
        return None
    return min(eligible, key=lambda bucket: bucket.canonical_size)


def find_best_match(buckets: Sequence[Bucket], target: Bucket) -> Bucket:
    """Snap ``target`` onto ``buckets``.

    Preference order: an entry of exactly the same size, the first entry
    bigger than the target, the biggest entry.
    """
    exact = find_exact_index(buckets, target)
    if exact != -1:
        return buckets[exact]
    bigger = find_first_bigger_index(buckets, target)
    if bigger != -1:
        return buckets[bigger]
    return buckets[find_max_value_index(buckets)]


def generate_granularity_menu(
    kind: Kind, anchor: Bucket | None = None, coarse: bool = False
) -> tuple[Bucket, ...]:
    """Return up to five ascending buckets to offer for a dimension of ``kind``.

    Without an anchor this is the kind's default menu (its coarse variant
    when ``coarse`` and one exists). With an anchor the menu starts at the
    anchor and continues with the next supported sizes above it.

    Example:
        >>> [str(b) for b in generate_granularity_menu("time", TimeBucket.from_iso("PT12H"))]
        ['PT12H', 'P1D', 'P1W', 'P1M', 'P3M']
    """
    helper = helper_for_kind(kind)
    if anchor is None:
        return helper.menu_for(coarse)
    _require_kind(anchor, helper.kind, "anchor")
    return _anchored_menu(helper.supported_granularities(anchor), anchor)


def default_granularity(
    kind: Kind,
    anchor: Bucket | None = None,
    custom_granularities: Sequence[Bucket] | None = None,
) -> Bucket:
    """Return the bucket a dimension starts out with before any range is known."""
    if anchor is not None:
        return anchor
    if custom_granularities is not None:
        if len(custom_granularities) < 3:
            raise InvalidArgument(
                f"Custom granularities need at least 3 entries to pick a default, "
                f"got {len(custom_granularities)}"
            )
        return custom_granularities[2]
    return helper_for_kind(kind).default_granularity


def resolve_best_bucket(
    range: Range,
    coarse: bool = False,
    anchor: Bucket | None = None,
    custom_granularities: Sequence[Bucket] | None = None,
) -> Bucket:
    """Pick the bucket that splits ``range`` into a readable number of groups.

    Args:
        range: Span of the data being bucketed
        coarse: Use the coarse checkpoint table (fewer, larger buckets)
        anchor: Bucket the data is already aggregated to, if any
        custom_granularities: Ascending buckets the result must come from

    Raises:
        InvalidArgument: If the anchor or custom granularities do not match
            the range's kind, or the custom granularities are empty or unsorted
    """
    helper = helper_for_range(range)
    if anchor is not None:
        _require_kind(anchor, helper.kind, "anchor")
    if custom_granularities is not None:
        _validate_custom_granularities(custom_granularities, helper.kind)

    range_length = range.length
    anchor_size = anchor.canonical_size if anchor is not None else 0

    for checkpoint in helper.checkpoints_for(coarse):
        if range_length > checkpoint.threshold or anchor_size > checkpoint.threshold:
            logger.debug(
                "%s range of length %s hit checkpoint %s -> %s",
                helper.kind,
                range_length,
                checkpoint.threshold,
                checkpoint.candidate,
            )
            return _resolve_checkpoint(
                helper, checkpoint.candidate, anchor, custom_granularities
            )

    if custom_granularities is not None:
        minimum = custom_granularities[find_min_value_index(custom_granularities)]
    else:
        minimum = helper.min_granularity

    if anchor is not None and anchor_size > minimum.canonical_size:
        logger.debug("No checkpoint hit, keeping anchor %s", anchor)
        return anchor
    logger.debug("No checkpoint hit, falling back to minimum %s", minimum)
    return minimum


def validate_granularity(kind: str, granularity: str) -> str | None:
    """Return a user-facing error message for a typed-in granularity, or None."""
    if kind == "time":
        if not is_valid_duration(granularity):
            return INVALID_DURATION_FORMAT
        if not is_floorable_duration(granularity):
            return NOT_FLOORABLE_DURATION
    if kind == "number" and not _DECIMAL_INTEGER.fullmatch(granularity):
        return INVALID_NUMBER_FORMAT
    return None


def is_granularity_valid(kind: str, granularity: str) -> bool:
    return validate_granularity(kind, granularity) is None


def _resolve_checkpoint(
    helper: BucketingHelper,
    candidate: Bucket,
    anchor: Bucket | None,
    custom_granularities: Sequence[Bucket] | None,
) -> Bucket:
    if anchor is not None:
        if custom_granularities is not None:
            universe = custom_granularities
        else:
            universe = helper.supported_granularities(anchor)
        closest = find_bigger_closest_to_ideal(universe, anchor, candidate)
        if closest is None:
            # Anchor or candidate is bigger than everything on offer
            logger.debug(
                "Nothing at least as big as %s and %s, using default %s",
                anchor,
                candidate,
                helper.default_granularity,
            )
            return helper.default_granularity
        return closest
    if custom_granularities is None:
        return candidate
    return find_best_match(custom_granularities, candidate)


def _anchored_menu(universe: Sequence[Bucket], anchor: Bucket) -> tuple[Bucket, ...]:
    start = find_first_bigger_index(universe, anchor)
    window = tuple(universe[start : start + MENU_LENGTH]) if start != -1 else ()
    if find_exact_index(window, anchor) == -1:
        return (anchor, *window[:-1])
    return window


def _require_kind(bucket: Bucket, kind: Kind, name: str) -> None:
    if bucket.kind != kind:
        raise InvalidArgument(
            f"{name} must be a {kind} bucket to match the range, "
            f"got {bucket.kind} bucket {bucket}"
        )


def _validate_custom_granularities(buckets: Sequence[Bucket], kind: Kind) -> None:
    if not buckets:
        raise InvalidArgument("Custom granularities must not be empty")
    for bucket in buckets:
        _require_kind(bucket, kind, "custom granularity")
    for previous, current in zip(buckets, buckets[1:]):
        if current.canonical_size < previous.canonical_size:
            raise InvalidArgument(
                f"Custom granularities must be sorted ascending, "
                f"got {previous} before {current}"
            )
