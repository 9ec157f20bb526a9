"""Driving activity profiles over a traversal and attaching reads.

:class:`RegionTraversal` plays the orchestrator role: it feeds a
coordinate-sorted stream of activity states into an
:class:`~regionforge.core.activity.ActivityProfile`, closes the profile out
whenever the stream jumps (new contig or a gap between intervals), and
yields regions as they become ready. :func:`assign_reads` then fills the
regions with reads.

Example:
    >>> traversal = RegionTraversal(lengths, config.activity)
    >>> regions = list(traversal.regions(states))
    >>> assign_reads(regions, source.fetch("chr1:1-100000"), max_reads_per_alignment_start=50)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Iterator

from regionforge.core.activity import ActivityProfile
from regionforge.core.region import Region, RegionEditor

if TYPE_CHECKING:
    from regionforge.config import ActivityConfig
    from regionforge.core.activity import ActivityState
    from regionforge.core.protocols import ContigLengths, ReadLike

logger = logging.getLogger(__name__)


class RegionTraversal:
    """Turns a stream of activity states into regions.

    Attributes:
        config: Region detection settings.
    """

    def __init__(self, contig_lengths: ContigLengths, config: ActivityConfig) -> None:
        """Initialize the traversal.

        Raises:
            ValueError: If the configuration is invalid.
        """
        config.validate()
        self._contig_lengths = contig_lengths
        self.config = config

    def regions(self, states: Iterable[ActivityState]) -> Iterator[Region]:
        """Yield regions in genomic order as they become ready.

        States must be sorted by contig and position. Wherever the next
        state does not directly follow the previous one, the pending
        profile is closed out as if the interval had ended.
        """
        profile: ActivityProfile | None = None
        n_regions = 0

        for state in states:
            if profile is not None and not self._continues(profile, state):
                for region in self._pop(profile, at_end_of_interval=True):
                    n_regions += 1
                    yield region
                profile = None

            if profile is None:
                profile = ActivityProfile(self.config.threshold, self._contig_lengths)

            profile.add(state)
            for region in self._pop(profile, at_end_of_interval=False):
                n_regions += 1
                yield region

        if profile is not None:
            for region in self._pop(profile, at_end_of_interval=True):
                n_regions += 1
                yield region

        logger.debug(f"Traversal produced {n_regions} regions")

    @staticmethod
    def _continues(profile: ActivityProfile, state: ActivityState) -> bool:
        if profile.is_empty():
            return True
        locus = state.locus
        return locus.contig == profile.contig and locus.start == profile.end + 1

    def _pop(self, profile: ActivityProfile, at_end_of_interval: bool) -> list[Region]:
        regions = profile.pop_ready_regions(
            self.config.extension,
            self.config.min_region_size,
            self.config.max_region_size,
            at_end_of_interval,
        )
        if self.config.force_active:
            for region in regions:
                RegionEditor(region).set_is_active(True)
        return regions


def assign_reads(
    regions: Iterable[Region],
    reads: Iterable[ReadLike],
    max_reads_per_alignment_start: int = 0,
) -> int:
    """Attach each read to every region whose extended span it overlaps.

    Reads must be coordinate-sorted. When ``max_reads_per_alignment_start``
    is positive, only the first that many reads starting at each position
    are kept.

    Args:
        regions: Regions to fill.
        reads: Coordinate-sorted reads.
        max_reads_per_alignment_start: Per-start cap; 0 disables it.

    Returns:
        Number of reads attached to at least one region.

    Raises:
        ValueError: If the cap is negative or reads are out of order.
    """
    if max_reads_per_alignment_start < 0:
        raise ValueError(
            f"max_reads_per_alignment_start must be >= 0, got {max_reads_per_alignment_start}"
        )

    targets = list(regions)
    current_start: tuple[str, int] | None = None
    n_at_start = 0
    n_assigned = 0
    n_downsampled = 0

    for read in reads:
        if read.is_empty:
            continue
        if max_reads_per_alignment_start:
            # Sorted input: only the count at the current start is needed
            key = (read.contig, read.start)
            if key != current_start:
                current_start = key
                n_at_start = 0
            n_at_start += 1
            if n_at_start > max_reads_per_alignment_start:
                n_downsampled += 1
                continue

        attached = False
        for region in targets:
            if region.read_overlaps_region(read):
                region.add(read)
                attached = True
        n_assigned += attached

    if n_downsampled:
        logger.debug(f"Downsampled {n_downsampled} reads above per-start cap")
    return n_assigned
