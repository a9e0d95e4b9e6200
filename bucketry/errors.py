class InvalidBucketInput(ValueError):
    """Raised when a value cannot be parsed into a number or time bucket."""


class InvalidArgument(ValueError):
    """Raised when arguments are well-typed but inconsistent with each other.

    Examples are custom granularities of mixed kinds, custom granularities
    that are not sorted ascending, or an anchor of a different kind than the
    range being bucketed.
    """
