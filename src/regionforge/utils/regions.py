"""Genomic region parsing and validation utilities.

Region strings use the standard 1-based inclusive convention and map
directly onto :class:`~regionforge.utils.intervals.Interval` without any
coordinate shift.

Example:
    >>> from regionforge.utils.regions import parse_region
    >>> region = parse_region("chr1:1000-2000")
    >>> print(region.contig)  # 'chr1'
    >>> print(region.start)   # 1000
    >>> print(region.size)    # 1001
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from regionforge.utils.intervals import Interval

if TYPE_CHECKING:
    from regionforge.core.protocols import ContigLengths


# Handles: chr1:1000-2000, chr1:1000..2000, chr1:1,000-2,000, scaffold_123:100-200
_REGION_PATTERN = re.compile(r"^(.+):([\d,]+)(?:-|\.\.)([\d,]+)$")


def parse_region(region_str: str) -> Interval:
    """Parse a region string into an Interval.

    Supported formats:
        chr1:1000-2000      (standard)
        chr1:1000..2000     (GFF style)
        chr1:1,000-2,000    (thousands separators)

    Args:
        region_str: Region string in format contig:start-end.

    Returns:
        Interval with 1-based inclusive coordinates.

    Raises:
        ValueError: If format is invalid or coordinates are invalid.
    """
    match = _REGION_PATTERN.match(region_str.strip())

    if not match:
        raise ValueError(
            f"Invalid region format: '{region_str}'. "
            "Expected format: contig:start-end (e.g., chr1:1000-2000)"
        )

    contig = match.group(1)
    start = int(match.group(2).replace(",", ""))
    end = int(match.group(3).replace(",", ""))

    if start < 1:
        raise ValueError(f"Start position must be >= 1, got {start}")
    if end < start:
        raise ValueError(f"End must be >= start: {start}-{end}")

    return Interval(contig, start, end)


def coerce_region(region: Interval | str) -> Interval:
    """Accept either an Interval or a region string."""
    if isinstance(region, Interval):
        return region
    return parse_region(region)


def validate_region(region: Interval, contig_lengths: ContigLengths) -> None:
    """Validate a region against contig bounds.

    Checks that:
    - The contig is known to the lookup
    - The region end does not run past the contig end

    Args:
        region: Interval to validate.
        contig_lengths: Contig-length lookup.

    Raises:
        KeyError: If the contig is unknown.
        ValueError: If region is out of bounds.
    """
    contig_length = contig_lengths.contig_length(region.contig)
    if region.end > contig_length:
        raise ValueError(
            f"Region end ({region.end}) exceeds length of {region.contig} ({contig_length})"
        )


def region_to_str(region: Interval, zero_based: bool = False) -> str:
    """Convert a region to string representation.

    Args:
        region: Interval (1-based inclusive).
        zero_based: If True, output 0-based half-open coordinates
            (BED style) instead of the 1-based inclusive default.

    Example:
        >>> region = Interval("chr1", 1000, 2000)
        >>> region_to_str(region)
        'chr1:1000-2000'
        >>> region_to_str(region, zero_based=True)
        'chr1:999-2000'
    """
    if zero_based:
        return f"{region.contig}:{region.start - 1}-{region.end}"
    return f"{region.contig}:{region.start}-{region.end}"
