"""Per-base activity profile and region boundary detection.

An activity profile accumulates, one base at a time, the probability that
each locus is "active" (carries real variation), and cuts the stream into
alternating active and inactive regions. A region is only emitted once
enough states have accumulated after it that its boundary can no longer
move, or when the caller signals the end of the traversal interval.

Example:
    >>> from regionforge.core.activity import ActivityProfile, ActivityState
    >>> profile = ActivityProfile(threshold=0.002, contig_lengths=lengths)
    >>> for position, prob in enumerate(probabilities, start=1):
    ...     profile.add(ActivityState.at("chr1", position, prob))
    ...     for region in profile.pop_ready_regions(100, 50, 300, False):
    ...         process(region)
    >>> remaining = profile.pop_ready_regions(100, 50, 300, True)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

import attrs
import numpy as np

from regionforge.core.region import Region
from regionforge.utils.intervals import Interval

if TYPE_CHECKING:
    from regionforge.core.protocols import ContigLengths

logger = logging.getLogger(__name__)


class InvalidSequenceError(ValueError):
    """A state was added that does not directly follow the previous one."""


# =============================================================================
# Activity States
# =============================================================================


class StateType(Enum):
    """Extra information carried by an activity state."""

    NONE = "none"


@attrs.define(frozen=True, slots=True)
class ActivityState:
    """Probability that a single locus is active.

    Attributes:
        locus: Single-base interval.
        active_prob: Probability of being active, between 0 and 1.
        state_type: Additional tag for the state.
    """

    locus: Interval
    active_prob: float
    state_type: StateType = StateType.NONE

    def __attrs_post_init__(self) -> None:
        if self.locus.size != 1:
            raise ValueError(
                f"Location for an ActivityState must have size 1 bp but saw {self.locus}"
            )

    @classmethod
    def at(cls, contig: str, position: int, active_prob: float) -> ActivityState:
        """Create a state for a single 1-based position."""
        return cls(Interval(contig, position, position), active_prob)

    def is_active(self, threshold: float) -> bool:
        return self.active_prob > threshold


# =============================================================================
# Activity Profile
# =============================================================================


class ActivityProfile:
    """Contiguous run of activity states awaiting conversion into regions.

    Not thread-safe: states must be added in coordinate order by a single
    traversal, and :meth:`add` must not race :meth:`pop_ready_regions`.

    Attributes:
        threshold: States with probability above this are active.
        region_start: Position of the first held state, or None if empty.
        region_stop: Position of the last held state, or None if empty.
    """

    def __init__(self, threshold: float, contig_lengths: ContigLengths) -> None:
        """Create an empty profile.

        Args:
            threshold: Activity probability threshold.
            contig_lengths: Lookup used to clamp the extended spans of
                emitted regions.
        """
        self.threshold = threshold
        self._contig_lengths = contig_lengths
        self._states: list[ActivityState] = []
        self.region_start: int | None = None
        self.region_stop: int | None = None

    def __repr__(self) -> str:
        return f"ActivityProfile{{start={self.region_start}, stop={self.region_stop}}}"

    def __len__(self) -> int:
        return len(self._states)

    def is_empty(self) -> bool:
        return not self._states

    @property
    def contig(self) -> str | None:
        return self._states[0].locus.contig if self._states else None

    @property
    def start(self) -> int:
        """First position covered by the profile.

        Raises:
            RuntimeError: If the profile is empty.
        """
        if self.region_start is None:
            raise RuntimeError("ActivityProfile is empty and has no start")
        return self.region_start

    @property
    def end(self) -> int:
        """Last position covered by the profile.

        Raises:
            RuntimeError: If the profile is empty.
        """
        if self.region_stop is None:
            raise RuntimeError("ActivityProfile is empty and has no end")
        return self.region_stop

    @property
    def states(self) -> tuple[ActivityState, ...]:
        return tuple(self._states)

    # -------------------------------------------------------------------------
    # Adding states
    # -------------------------------------------------------------------------

    def add(self, state: ActivityState) -> None:
        """Append the next state.

        Raises:
            InvalidSequenceError: If the state is not on the profile's contig
                at the position immediately after the last state.
        """
        if state is None:
            raise ValueError("ActivityState cannot be None")
        locus = state.locus

        if self.region_start is None:
            self.region_start = locus.start
            self.region_stop = locus.start
        else:
            if locus.contig != self.contig or locus.start != self.region_stop + 1:
                raise InvalidSequenceError(
                    f"Bad add call to ActivityProfile: loc {locus} not immediately "
                    f"after last loc {self.contig}:{self.region_stop}"
                )
            self.region_stop += 1

        self._states.append(state)

    # -------------------------------------------------------------------------
    # Popping regions
    # -------------------------------------------------------------------------

    def pop_ready_regions(
        self,
        extension: int,
        min_region_size: int,
        max_region_size: int,
        at_end_of_interval: bool,
    ) -> list[Region]:
        """Remove and return the regions at the front of the profile that are ready.

        A region is ready when no future state can change it: either at
        least ``max_region_size`` states are held, or ``at_end_of_interval``
        closes out the profile (e.g. at the end of a contig). Regions are
        returned in genomic order and none is larger than
        ``max_region_size``. The list may be empty.

        Args:
            extension: Extension given to the constructed regions.
            min_region_size: Minimum size of the left piece when an
                over-long active run has to be cut.
            max_region_size: Maximum size of a returned region.
            at_end_of_interval: Emit regions even without enough look-ahead.

        Returns:
            Regions in genomic order.

        Raises:
            ValueError: If extension is negative or a size is not positive.
        """
        if extension < 0:
            raise ValueError(f"extension must be >= 0 but got {extension}")
        if min_region_size <= 0:
            raise ValueError(f"min_region_size must be >= 1 but got {min_region_size}")
        if max_region_size <= 0:
            raise ValueError(f"max_region_size must be >= 1 but got {max_region_size}")

        regions: list[Region] = []

        while self._states and (at_end_of_interval or len(self._states) >= max_region_size):
            first = self._states[0]
            is_active = first.is_active(self.threshold)
            boundary = self._find_end_of_region(is_active, min_region_size, max_region_size)

            locus = first.locus
            span = Interval(locus.contig, locus.start, locus.start + boundary - 1)
            region = Region(span, is_active, extension, self._contig_lengths)
            regions.append(region)
            del self._states[:boundary]

            if self._states:
                self.region_start = self._states[0].locus.start
            else:
                self.region_start = None
                self.region_stop = None

            logger.debug(f"Popped {'active' if is_active else 'inactive'} region {span}")

        return regions

    def _find_end_of_region(
        self,
        is_active: bool,
        min_region_size: int,
        max_region_size: int,
    ) -> int:
        """Number of leading states that make up the next region.

        An active run that reaches ``max_region_size`` is cut at the best
        cut site instead.
        """
        boundary = self._find_first_activity_boundary(is_active, max_region_size)
        if is_active and boundary == max_region_size:
            return self._find_best_cut_site(boundary, min_region_size)
        return boundary

    def _find_first_activity_boundary(self, is_active: bool, max_region_size: int) -> int:
        """Index of the first state whose activity differs from ``is_active``.

        Scans at most ``max_region_size`` states; returns the scan limit if
        every scanned state matches.
        """
        limit = min(len(self._states), max_region_size)
        for index in range(limit):
            if self._states[index].is_active(self.threshold) != is_active:
                return index
        return limit

    def _find_best_cut_site(self, end_of_active_region: int, min_region_size: int) -> int:
        """Cut an over-long active run at its weakest state.

        Picks the state with the globally minimum probability among indices
        ``[min_region_size, end_of_active_region)``, earliest on ties, and
        returns it as the exclusive end of the region. The run is left
        uncut if that range is empty.
        """
        if min_region_size >= end_of_active_region:
            return end_of_active_region

        probs = np.fromiter(
            (state.active_prob for state in self._states[min_region_size:end_of_active_region]),
            dtype=np.float64,
            count=end_of_active_region - min_region_size,
        )
        # argmin returns the first occurrence of the minimum
        return min_region_size + int(np.argmin(probs))
