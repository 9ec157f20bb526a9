"""Core region logic for regionforge.

This module contains the region life cycle:

- activity: Per-base activity states and region boundary detection
- region: Regions, their extended spans and attached reads
- trimmer: Trimming regions around their variants
- traversal: Driving profiles over a state stream and attaching reads
"""

from regionforge.core.activity import (
    ActivityProfile,
    ActivityState,
    InvalidSequenceError,
    StateType,
)
from regionforge.core.region import Region, RegionEditor
from regionforge.core.traversal import RegionTraversal, assign_reads
from regionforge.core.trimmer import RegionTrimmer, TrimOutcome, TrimResult

__all__ = [
    "ActivityProfile",
    "ActivityState",
    "InvalidSequenceError",
    "StateType",
    "Region",
    "RegionEditor",
    "RegionTraversal",
    "assign_reads",
    "RegionTrimmer",
    "TrimOutcome",
    "TrimResult",
]
