"""Regions of the genome and the reads attached to them.

A region is defined by two intervals: a primary span, the territory that
is actually called, and an extended span (the primary span padded by a
symmetric extension, clamped to the contig) over which reads are
gathered. Reads overlapping the extended span may be attached in
coordinate order.

Life cycle:
    1. An :class:`~regionforge.core.activity.ActivityProfile` emits a
       read-free region, say primary 350-450 with extension 250
       (extended 100-700).
    2. Reads overlapping 100-700 are attached with :meth:`Region.add`.
    3. Once variants are known the region is trimmed to a tighter primary
       span with :meth:`Region.trim`, which builds a new region and clips
       the reads into it. The original is left untouched.

Example:
    >>> from regionforge.core.region import Region
    >>> from regionforge.io.fasta import SequenceDictionary
    >>> from regionforge.utils.intervals import Interval
    >>> lengths = SequenceDictionary({"chr1": 1000})
    >>> region = Region(Interval("chr1", 100, 200), True, 50, lengths)
    >>> region.extended_span
    Interval(contig='chr1', start=50, end=250)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from regionforge.utils.intervals import Interval

if TYPE_CHECKING:
    from regionforge.core.protocols import ContigLengths, ReadLike
    from regionforge.io.fasta import GenomeAccessor

logger = logging.getLogger(__name__)


def _read_interval(read: ReadLike) -> Interval:
    return Interval(read.contig, read.start, read.end)


# =============================================================================
# Region
# =============================================================================


class Region:
    """A called span, its read-gathering extension, and attached reads.

    Invariants:
        - ``extended_span`` contains ``span``.
        - Every attached read overlaps ``extended_span``, shares its contig,
          and reads are in non-decreasing start order.
        - ``read_span`` is ``extended_span`` unioned with every read.

    The activity flag is read-only here; see :class:`RegionEditor`.

    Attributes:
        span: Primary span over which variants are called.
        extension: Symmetric padding used to build the extended span.
        extended_span: Span over which reads are gathered.
    """

    def __init__(
        self,
        span: Interval,
        is_active: bool,
        extension: int,
        contig_lengths: ContigLengths,
    ) -> None:
        """Create a region containing no reads.

        Args:
            span: Primary span of the region.
            is_active: Whether this is an active region.
            extension: Symmetric padding for the extended span.
            contig_lengths: Lookup used to clamp the extended span.

        Raises:
            ValueError: If the span is empty or the extension is negative.
        """
        if span is None:
            raise ValueError("Region span cannot be None")
        if span.size <= 0:
            raise ValueError(f"Region cannot be of zero size: {span}")
        if extension < 0:
            raise ValueError(f"Region extension must be >= 0, got {extension}")

        self._span = span
        self._is_active = is_active
        self._extension = extension
        self._contig_lengths = contig_lengths
        self._extended_span = span.expand_within_contig(
            extension, contig_lengths.contig_length(span.contig)
        )
        self._reads: list[ReadLike] = []
        self._read_span = self._extended_span
        self._finalized = False

    def __repr__(self) -> str:
        return f"Region {self._span} active?={self._is_active} nReads={len(self._reads)}"

    def __len__(self) -> int:
        return len(self._reads)

    # -------------------------------------------------------------------------
    # Spans
    # -------------------------------------------------------------------------

    @property
    def contig(self) -> str:
        return self._span.contig

    @property
    def start(self) -> int:
        return self._span.start

    @property
    def end(self) -> int:
        return self._span.end

    @property
    def span(self) -> Interval:
        """Primary span, excluding the extension."""
        return self._span

    @property
    def extension(self) -> int:
        return self._extension

    @property
    def extended_span(self) -> Interval:
        """Primary span plus the extension, clamped to the contig."""
        return self._extended_span

    @property
    def read_span(self) -> Interval:
        """Extended span unioned with the spans of all attached reads."""
        return self._read_span

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def contig_lengths(self) -> ContigLengths:
        return self._contig_lengths

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def reads(self) -> tuple[ReadLike, ...]:
        """Snapshot of the attached reads in coordinate order."""
        return tuple(self._reads)

    def size(self) -> int:
        """Number of attached reads."""
        return len(self._reads)

    def read_overlaps_region(self, read: ReadLike) -> bool:
        """Check whether a read could be attached to this region."""
        if read.is_empty or read.start > read.end:
            return False
        return _read_interval(read).overlaps(self._extended_span)

    def add(self, read: ReadLike) -> None:
        """Attach a read.

        Reads must arrive in non-decreasing start order on a single contig;
        they are not sorted here.

        Raises:
            ValueError: If the read does not overlap the extended span, is on
                a different contig than the previous read, or starts before it.
        """
        if read is None:
            raise ValueError("Read cannot be None")
        if not self.read_overlaps_region(read):
            raise ValueError(
                f"Read {read.contig}:{read.start}-{read.end} doesn't overlap "
                f"region extended span {self._extended_span}"
            )

        if self._reads:
            last = self._reads[-1]
            if last.contig != read.contig:
                raise ValueError(
                    f"Attempting to add a read on {read.contig} to a region "
                    f"holding reads on {last.contig}"
                )
            if read.start < last.start:
                raise ValueError(
                    f"Attempting to add a read out of order: last read starts at "
                    f"{last.start}, new read starts at {read.start}"
                )

        self._reads.append(read)
        self._read_span = self._read_span.span_with(_read_interval(read))

    def add_all(self, reads: Iterable[ReadLike]) -> None:
        """Attach reads in the given order.

        Not atomic: if one read is rejected, the reads before it stay
        attached.
        """
        if reads is None:
            raise ValueError("Reads cannot be None")
        for read in reads:
            self.add(read)

    def remove_all(self, reads_to_remove: Iterable[ReadLike]) -> None:
        """Detach every read equal to one in ``reads_to_remove``."""
        if reads_to_remove is None:
            raise ValueError("Reads to remove cannot be None")
        removal = list(reads_to_remove)
        self._reads = [read for read in self._reads if read not in removal]
        self._rebuild_read_span()

    def clear_reads(self) -> None:
        self._reads.clear()
        self._read_span = self._extended_span

    def _rebuild_read_span(self) -> None:
        read_span = self._extended_span
        for read in self._reads:
            read_span = read_span.span_with(_read_interval(read))
        self._read_span = read_span

    # -------------------------------------------------------------------------
    # Trimming
    # -------------------------------------------------------------------------

    def trim(self, span: Interval, extended_span: Interval) -> Region:
        """Trim this region to no more than ``span`` and ``extended_span``.

        The new primary span is the intersection of ``span`` with this
        region's primary span. Its extension is the smallest symmetric
        padding that reaches ``extended_span``, capped at this region's own
        extension. If ``extended_span`` already holds the new span padded
        by the full extension, the extension is kept unchanged. Reads are
        clipped to the new extended span; reads that no longer overlap are
        dropped.

        For example, with this region at 100-200 (extension 50, extended
        50-250), ``trim(150-225, 150-275)`` yields primary 150-200. Reaching
        275 needs 75 bases on the right but the extension is capped at 50,
        so the extended span is 100-250.

        Args:
            span: Requested primary span.
            extended_span: Requested extended span; must contain ``span``.

        Returns:
            A new region. This region is unmodified.

        Raises:
            ValueError: If either span is None, ``extended_span`` does not
                contain ``span``, or ``span`` misses this region entirely.
        """
        if span is None:
            raise ValueError("Trim span cannot be None")
        if extended_span is None:
            raise ValueError("Trim extended span cannot be None")
        if not extended_span.contains(span):
            raise ValueError(
                f"The requested extended span {extended_span} must fully contain "
                f"the requested span {span}"
            )
        if not self._span.overlaps(span):
            raise ValueError(f"Trim span {span} does not overlap region span {self._span}")

        sub_span = self._span.intersect(span)
        contig_length = self._contig_lengths.contig_length(sub_span.contig)
        full_span = sub_span.expand_within_contig(self._extension, contig_length)
        if extended_span.contains(full_span):
            # Clamping at the contig ends hides how much extension was asked for
            extension = self._extension
        else:
            needed_left = max(0, sub_span.start - extended_span.start)
            needed_right = max(0, extended_span.end - sub_span.end)
            extension = min(max(needed_left, needed_right), self._extension)

        result = Region(sub_span, self._is_active, extension, self._contig_lengths)
        bounds = result.extended_span

        clipped = []
        for read in self._reads:
            clipped_read = read.clip_to_interval(bounds.start, bounds.end)
            if not clipped_read.is_empty and result.read_overlaps_region(clipped_read):
                clipped.append(clipped_read)

        # Stable: reads clipped to the same start keep their original order
        clipped.sort(key=lambda read: read.start)
        result.add_all(clipped)

        logger.debug(
            f"Trimmed {self._span} (ext {self._extension}) to {sub_span} "
            f"(ext {extension}), {len(clipped)}/{len(self._reads)} reads kept"
        )
        return result

    def trim_to_extension(self, span: Interval, extension: int) -> Region:
        """Trim to ``span`` with an extended span of ``span`` padded by ``extension``.

        Raises:
            ValueError: If the extension is negative.
        """
        if span is None:
            raise ValueError("Trim span cannot be None")
        if extension < 0:
            raise ValueError(f"Extension must be >= 0, got {extension}")
        extended_span = span.expand_within_contig(
            extension, self._contig_lengths.contig_length(span.contig)
        )
        return self.trim(span, extended_span)

    def trim_to_span(self, span: Interval) -> Region:
        """Equivalent to ``trim(span, span)``."""
        return self.trim(span, span)

    # -------------------------------------------------------------------------
    # Misc
    # -------------------------------------------------------------------------

    def get_reference(self, genome: GenomeAccessor, padding: int = 0) -> str:
        """Reference bases under the extended span plus ``padding`` on each side.

        The padded span is truncated at the contig ends.

        Raises:
            ValueError: If padding is negative.
        """
        if padding < 0:
            raise ValueError(f"Padding must be >= 0, got {padding}")
        padded = self._extended_span.expand_within_contig(
            padding, genome.contig_length(self.contig)
        )
        return genome.get_sequence(padded.contig, padded.start, padded.end)

    def equals_ignore_reads(self, other: Region | None) -> bool:
        """Compare spans, extension and activity, ignoring attached reads."""
        return (
            other is not None
            and self._is_active == other._is_active
            and self._extension == other._extension
            and self._span == other._span
            and self._extended_span == other._extended_span
        )

    @property
    def finalized(self) -> bool:
        return self._finalized

    def set_finalized(self, value: bool) -> None:
        """Mark the region finalized. Advisory only; nothing is enforced."""
        self._finalized = value

    def is_finalized(self) -> bool:
        return self._finalized


# =============================================================================
# Mutation Handle
# =============================================================================


class RegionEditor:
    """Privileged mutation handle for a region.

    Overriding the activity of an emitted region is a debugging operation
    (e.g. forcing every region active). Only the orchestrating traversal
    creates editors; everything else sees the read-only :class:`Region`.

    Example:
        >>> RegionEditor(region).set_is_active(True)
    """

    def __init__(self, region: Region) -> None:
        self._region = region

    @property
    def region(self) -> Region:
        return self._region

    def set_is_active(self, value: bool) -> None:
        if self._region._is_active != value:
            logger.debug(f"Overriding activity of {self._region.span} to {value}")
        self._region._is_active = value
