"""Utility functions for regionforge.

- Closed 1-based genomic intervals
- Region string parsing and validation
- Logging configuration

Example:
    >>> from regionforge.utils import Interval, parse_region
    >>> parse_region("chr1:100-200") == Interval("chr1", 100, 200)
    True
"""

from regionforge.utils.intervals import Interval, trim_interval_to_contig
from regionforge.utils.regions import (
    coerce_region,
    parse_region,
    region_to_str,
    validate_region,
)

__all__ = [
    "Interval",
    "trim_interval_to_contig",
    "coerce_region",
    "parse_region",
    "region_to_str",
    "validate_region",
]
