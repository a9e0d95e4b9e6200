from .bucket import (
    Bucket,
    NumberBucket,
    TimeBucket,
    canonical_size,
    parse_bucket,
    parse_granularities,
)
from .checkpoints import Checkpoint
from .duration import Duration
from .errors import InvalidArgument, InvalidBucketInput
from .granularity import (
    default_granularity,
    generate_granularity_menu,
    is_granularity_valid,
    resolve_best_bucket,
    validate_granularity,
)
from .numeric import synthesize_number_buckets
from .range import Range

__all__ = [
    "Bucket",
    "NumberBucket",
    "TimeBucket",
    "Duration",
    "Range",
    "Checkpoint",
    "parse_bucket",
    "parse_granularities",
    "canonical_size",
    "resolve_best_bucket",
    "generate_granularity_menu",
    "default_granularity",
    "synthesize_number_buckets",
    "validate_granularity",
    "is_granularity_valid",
    "InvalidBucketInput",
    "InvalidArgument",
]
