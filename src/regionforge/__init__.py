"""regionforge: active-region detection and trimming over a genome.

regionforge partitions a genome into bounded regions from a per-base
activity signal, attaches overlapping reads to each region, and trims
regions down to the span around their variants once those are known.

Example:
    >>> import regionforge
    >>> regionforge.__version__
    '0.1.0'

Modules:
    core: Activity profiles, regions, trimming and traversal
    io: Reference, read and variant access (pyfaidx, pysam)
    config: attrs configuration bundles
    utils: Intervals, region strings, logging
"""

__version__ = "0.1.0"

from regionforge.core import (
    ActivityProfile,
    ActivityState,
    InvalidSequenceError,
    Region,
    RegionTrimmer,
    TrimOutcome,
    TrimResult,
)
from regionforge.utils.intervals import Interval

__all__ = [
    "__version__",
    "ActivityProfile",
    "ActivityState",
    "InvalidSequenceError",
    "Interval",
    "Region",
    "RegionTrimmer",
    "TrimOutcome",
    "TrimResult",
]
