"""Aligned read records and BAM access.

This module provides the read records attached to regions, and a pysam
reader that streams them out of an indexed BAM in coordinate order.

Coordinate conventions:
    - pysam: 0-based half-open
    - AlignedRead: 1-based inclusive (same as Interval)

Example:
    >>> from regionforge.io.reads import ReadSource
    >>> with ReadSource("sample.bam", min_mapq=20) as source:
    ...     region.add_all(source.fetch(region.extended_span))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator

import attrs
import pysam

from regionforge.io.fasta import SequenceDictionary
from regionforge.utils.intervals import Interval
from regionforge.utils.regions import coerce_region

logger = logging.getLogger(__name__)

# CIGAR operations that clip the read without consuming reference
CIGAR_S = 4  # Soft clip
CIGAR_H = 5  # Hard clip


# =============================================================================
# Data Structures
# =============================================================================


@attrs.define(frozen=True, slots=True)
class AlignedRead:
    """Reference footprint of an aligned read.

    A read whose ``end`` is below its ``start`` has been clipped away
    entirely and is empty.

    Attributes:
        name: Read name.
        contig: Contig the read is aligned to.
        start: First aligned base (1-based, inclusive).
        end: Last aligned base (1-based, inclusive).
        unclipped_start: Start including leading soft/hard clips.
        mapping_quality: Mapping quality.
        is_reverse: Whether the read aligns to the reverse strand.
    """

    name: str
    contig: str
    start: int
    end: int
    unclipped_start: int = attrs.field()
    mapping_quality: int = 60
    is_reverse: bool = False

    @unclipped_start.default
    def _default_unclipped_start(self) -> int:
        return self.start

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    @property
    def length(self) -> int:
        """Aligned length on the reference (0 if empty)."""
        return max(0, self.end - self.start + 1)

    @property
    def interval(self) -> Interval:
        """Reference span as an Interval.

        Raises:
            ValueError: If the read is empty.
        """
        if self.is_empty:
            raise ValueError(f"Read {self.name} is empty and has no interval")
        return Interval(self.contig, self.start, self.end)

    def overlaps(self, interval: Interval) -> bool:
        return (
            not self.is_empty
            and self.contig == interval.contig
            and self.start <= interval.end
            and interval.start <= self.end
        )

    def clip_to_interval(self, start: int, end: int) -> AlignedRead:
        """Hard-clip the read to ``[start, end]``.

        The unclipped start is preserved so the original alignment position
        stays recoverable.

        Returns:
            A new read, possibly empty.
        """
        return attrs.evolve(self, start=max(self.start, start), end=min(self.end, end))

    @classmethod
    def from_segment(cls, segment: pysam.AlignedSegment) -> AlignedRead:
        """Build a read from a mapped pysam segment."""
        start = segment.reference_start + 1
        leading_clip = 0
        for op, length in segment.cigartuples or []:
            if op not in (CIGAR_S, CIGAR_H):
                break
            leading_clip += length

        return cls(
            name=segment.query_name,
            contig=segment.reference_name,
            start=start,
            # 0-based exclusive end == 1-based inclusive end
            end=segment.reference_end,
            unclipped_start=start - leading_clip,
            mapping_quality=segment.mapping_quality,
            is_reverse=segment.is_reverse,
        )


# =============================================================================
# BAM Reader
# =============================================================================


class ReadSource:
    """Stream aligned reads from an indexed BAM file.

    Attributes:
        path: Path to the BAM file.
        min_mapq: Minimum mapping quality.
        include_secondary: Keep secondary and supplementary alignments.
    """

    def __init__(
        self,
        bam_path: Path | str,
        min_mapq: int = 0,
        include_secondary: bool = False,
    ) -> None:
        """Initialize the read source.

        Args:
            bam_path: Path to indexed BAM file.
            min_mapq: Minimum mapping quality.
            include_secondary: Keep secondary and supplementary alignments.

        Raises:
            FileNotFoundError: If BAM file doesn't exist.
            ValueError: If BAM file is not indexed.
        """
        self.path = Path(bam_path)
        self.min_mapq = min_mapq
        self.include_secondary = include_secondary

        if not self.path.exists():
            raise FileNotFoundError(f"BAM file not found: {self.path}")

        index_paths = [
            self.path.with_suffix(".bai"),
            Path(str(self.path) + ".bai"),
            Path(str(self.path) + ".csi"),
        ]
        if not any(p.exists() for p in index_paths):
            raise ValueError(f"BAM index not found. Please run: samtools index {self.path}")

        self._bam: pysam.AlignmentFile | None = None
        self._open()

    def _open(self) -> None:
        self._bam = pysam.AlignmentFile(str(self.path), "rb")
        logger.info(f"Opened BAM file: {self.path.name}")

    def __enter__(self) -> ReadSource:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the BAM file."""
        if self._bam is not None:
            self._bam.close()
            self._bam = None

    @property
    def sequence_dictionary(self) -> SequenceDictionary:
        """Contig lengths from the BAM header."""
        if self._bam is None:
            raise RuntimeError("BAM file not open")
        return SequenceDictionary(zip(self._bam.references, self._bam.lengths))

    def fetch(self, region: Interval | str) -> Iterator[AlignedRead]:
        """Yield reads overlapping a region, in coordinate order.

        Args:
            region: Interval or region string (1-based inclusive).

        Yields:
            AlignedRead records passing the filters.
        """
        if self._bam is None:
            raise RuntimeError("BAM file not open")

        interval = coerce_region(region)
        n_skipped = 0
        for segment in self._bam.fetch(interval.contig, interval.start - 1, interval.end):
            if segment.is_unmapped:
                n_skipped += 1
                continue
            if not self.include_secondary and (segment.is_secondary or segment.is_supplementary):
                n_skipped += 1
                continue
            if segment.mapping_quality < self.min_mapq:
                n_skipped += 1
                continue
            yield AlignedRead.from_segment(segment)

        if n_skipped:
            logger.debug(f"Skipped {n_skipped} reads in {interval}")


# =============================================================================
# Convenience Functions
# =============================================================================


def fetch_reads(
    bam_path: Path | str,
    region: Interval | str,
    min_mapq: int = 0,
) -> list[AlignedRead]:
    """Read every alignment overlapping a region from an indexed BAM.

    Args:
        bam_path: Path to indexed BAM file.
        region: Interval or region string (1-based inclusive).
        min_mapq: Minimum mapping quality.

    Returns:
        Reads in coordinate order.
    """
    with ReadSource(bam_path, min_mapq=min_mapq) as source:
        return list(source.fetch(region))
