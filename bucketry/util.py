"""Utility constants and helpers for bucketry.

Time unit constants represent canonical durations in milliseconds.
These are the units every time bucket and time range is compared in.
"""

from typing import Literal, TypeAlias

Kind: TypeAlias = Literal["time", "number"]

# Time unit constants (all values in milliseconds)
SECOND = 1000
MINUTE = 60000
HOUR = 3600000
DAY = 86400000
WEEK = 604800000
MONTH = 2592000000
YEAR = 31536000000

# Number of entries offered in a granularity menu
MENU_LENGTH = 5

# Number of candidates synthesized around a number anchor
ANCHORED_NUMBER_COUNT = 10
