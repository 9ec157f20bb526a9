"""Genomic interval operations.

This module provides the closed interval type used throughout regionforge:

- Overlap and containment tests
- Intersection and spanning union
- Expansion clamped to contig bounds

All coordinates are 1-based and inclusive on both ends, so an interval
``chr1:100-200`` covers 101 bases. A zero-length interval has
``end == start - 1``.

Example:
    >>> from regionforge.utils.intervals import Interval
    >>> a = Interval("chr1", 100, 200)
    >>> b = Interval("chr1", 150, 250)
    >>> a.intersect(b)
    Interval(contig='chr1', start=150, end=200)
    >>> a.span_with(b)
    Interval(contig='chr1', start=100, end=250)
"""

from __future__ import annotations

import attrs

# =============================================================================
# Data Structures
# =============================================================================


@attrs.define(frozen=True, slots=True, order=True)
class Interval:
    """A closed genomic interval.

    Equality and ordering follow ``(contig, start, end)``.

    Attributes:
        contig: Chromosome/contig identifier.
        start: Start position (1-based, inclusive).
        end: End position (1-based, inclusive).
    """

    contig: str
    start: int
    end: int

    def __attrs_post_init__(self) -> None:
        if not self.contig:
            raise ValueError("Interval contig cannot be empty")
        if self.start < 1:
            raise ValueError(f"Interval start must be >= 1, got {self.start}")
        if self.end < self.start - 1:
            raise ValueError(f"Interval end must be >= start - 1: {self.start}-{self.end}")

    def __str__(self) -> str:
        return f"{self.contig}:{self.start}-{self.end}"

    @property
    def size(self) -> int:
        """Number of bases covered."""
        return self.end - self.start + 1

    def overlaps(self, other: Interval) -> bool:
        """Check if this interval shares at least one base with another."""
        if self.contig != other.contig or self.size <= 0 or other.size <= 0:
            return False
        return self.start <= other.end and other.start <= self.end

    def contains(self, other: Interval) -> bool:
        """Check if this interval fully contains another."""
        if self.contig != other.contig:
            return False
        return self.start <= other.start and other.end <= self.end

    def contains_position(self, contig: str, position: int) -> bool:
        """Check if a single position falls inside this interval."""
        return self.contig == contig and self.start <= position <= self.end

    def intersect(self, other: Interval) -> Interval:
        """Return the bases shared by both intervals.

        Raises:
            ValueError: If the intervals do not overlap.
        """
        if not self.overlaps(other):
            raise ValueError(f"{self} does not overlap {other}")
        return Interval(self.contig, max(self.start, other.start), min(self.end, other.end))

    def span_with(self, other: Interval) -> Interval:
        """Return the smallest interval containing both intervals.

        Raises:
            ValueError: If the intervals are on different contigs.
        """
        if self.contig != other.contig:
            raise ValueError(f"Cannot span intervals on different contigs: {self}, {other}")
        return Interval(self.contig, min(self.start, other.start), max(self.end, other.end))

    def merge_with_contiguous(self, other: Interval) -> Interval:
        """Merge with an overlapping or directly adjacent interval.

        Raises:
            ValueError: If the intervals leave a gap between them.
        """
        if self.contig != other.contig or (
            self.end + 1 < other.start or other.end + 1 < self.start
        ):
            raise ValueError(f"Intervals are not contiguous: {self}, {other}")
        return self.span_with(other)

    def expand_within_contig(self, padding: int, contig_length: int) -> Interval:
        """Pad both sides by ``padding`` bases, clamped to ``[1, contig_length]``.

        Raises:
            ValueError: If padding is negative.
        """
        if padding < 0:
            raise ValueError(f"Padding must be >= 0, got {padding}")
        return trim_interval_to_contig(
            self.contig, self.start - padding, self.end + padding, contig_length
        )


# =============================================================================
# Clamping Operations
# =============================================================================


def trim_interval_to_contig(
    contig: str,
    start: int,
    end: int,
    contig_length: int,
) -> Interval:
    """Create an interval clamped to the bounds of its contig.

    Args:
        contig: Contig name.
        start: Requested start (may be < 1).
        end: Requested end (may exceed the contig length).
        contig_length: Length of the contig in bases.

    Returns:
        Interval covering ``[max(1, start), min(end, contig_length)]``.

    Raises:
        ValueError: If the contig length is not positive or the requested
            interval lies entirely off the contig.
    """
    if contig_length < 1:
        raise ValueError(f"Contig length must be >= 1, got {contig_length}")
    if start > contig_length or end < 1:
        raise ValueError(
            f"{contig}:{start}-{end} lies outside contig of length {contig_length}"
        )
    return Interval(contig, max(1, start), min(end, contig_length))
