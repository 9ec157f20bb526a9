"""Trimming of regions down to the span around their variants.

Once the variants inside a region are known, most of the region is usually
non-variant. The trimmer finds the smallest span covering the variants,
pads it, and splits what is left into a left and a right non-variant
flank. Each piece can be materialised as its own region through
:meth:`Region.trim <regionforge.core.region.Region.trim>`.

Outcomes:
    - NO_VARIATION: no variant overlaps the region. No callable region; the
      whole region is the left flank.
    - NO_TRIMMING: trimming is disabled. The callable region is the whole
      region; there are no flanks.
    - TRIMMED: the callable region covers the padded variant span; up to two
      flanks cover the rest.

In every outcome the present flanks and the callable span partition the
region's primary span.

Example:
    >>> from regionforge.core.trimmer import RegionTrimmer, TrimOutcome
    >>> trimmer = RegionTrimmer(lengths, variant_padding=20)
    >>> result = trimmer.trim(region, variants)
    >>> if result.outcome is TrimOutcome.TRIMMED:
    ...     callable_region = result.callable_region()
    ...     left = result.left_flank_region()
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Iterable

import attrs

from regionforge.utils.intervals import Interval

if TYPE_CHECKING:
    from regionforge.config import TrimmingConfig
    from regionforge.core.protocols import ContigLengths, VariantLike
    from regionforge.core.region import Region

logger = logging.getLogger(__name__)


def _variant_interval(variant: VariantLike) -> Interval:
    return Interval(variant.contig, variant.start, variant.end)


# =============================================================================
# Trim Result
# =============================================================================


class TrimOutcome(Enum):
    """Which of the three trimming cases produced a result."""

    NO_VARIATION = "no_variation"
    NO_TRIMMING = "no_trimming"
    TRIMMED = "trimmed"


@attrs.define(frozen=True, slots=False, eq=False)
class TrimResult:
    """Result of trimming one region.

    Derived regions are built lazily from the immutable fields and
    memoised, so repeated calls return the same region object.

    Attributes:
        original_region: The region that was trimmed (not owned).
        outcome: Which trimming case applied.
        callable_events: Variants overlapping the region.
        variant_span: Smallest span covering the callable events.
        extended_span: Padded variant span.
        left_flank: Non-variant span before the padded variant span.
        right_flank: Non-variant span after the padded variant span.
    """

    original_region: Region
    outcome: TrimOutcome
    callable_events: tuple[VariantLike, ...] = attrs.field(default=(), converter=tuple)
    variant_span: Interval | None = None
    extended_span: Interval | None = None
    left_flank: Interval | None = None
    right_flank: Interval | None = None

    def __attrs_post_init__(self) -> None:
        if (
            self.extended_span is not None
            and self.variant_span is not None
            and not self.extended_span.contains(self.variant_span)
        ):
            raise ValueError(
                f"The extended callable span {self.extended_span} must include "
                f"the callable span {self.variant_span}"
            )

    @classmethod
    def no_variation(cls, region: Region) -> TrimResult:
        """The whole region is a non-variant left flank."""
        return cls(region, TrimOutcome.NO_VARIATION, left_flank=region.span)

    @classmethod
    def no_trimming(cls, region: Region, events: Iterable[VariantLike]) -> TrimResult:
        """The whole region is callable."""
        return cls(
            region,
            TrimOutcome.NO_TRIMMING,
            events,
            variant_span=region.span,
            extended_span=region.span,
        )

    def is_variation_present(self) -> bool:
        return bool(self.callable_events)

    def has_left_flank(self) -> bool:
        return self.left_flank is not None

    def has_right_flank(self) -> bool:
        return self.right_flank is not None

    def needs_trimming(self) -> bool:
        return self.has_left_flank() or self.has_right_flank()

    @property
    def callable_span(self) -> Interval | None:
        """Part of the primary span between the flanks, or None without variation."""
        if self.outcome is TrimOutcome.NO_VARIATION:
            return None
        return self.extended_span.intersect(self.original_region.span)

    def callable_region(self) -> Region:
        """The variant-containing region.

        Raises:
            RuntimeError: If no variation was found.
        """
        if self.outcome is TrimOutcome.NO_VARIATION:
            raise RuntimeError("there is no variation thus no callable region")
        return self._callable_region

    def left_flank_region(self) -> Region | None:
        """The trimmed-out left non-variant region, or None.

        Without variation this is the original region itself.
        """
        return self._left_flank_region

    def right_flank_region(self) -> Region | None:
        """The trimmed-out right non-variant region, or None."""
        return self._right_flank_region

    @cached_property
    def _callable_region(self) -> Region:
        if self.outcome is TrimOutcome.NO_TRIMMING:
            return self.original_region
        return self.original_region.trim(self.variant_span, self.extended_span)

    @cached_property
    def _left_flank_region(self) -> Region | None:
        if self.left_flank is None:
            return None
        if self.outcome is TrimOutcome.NO_VARIATION:
            return self.original_region
        return self._flank_region(self.left_flank)

    @cached_property
    def _right_flank_region(self) -> Region | None:
        if self.right_flank is None:
            return None
        return self._flank_region(self.right_flank)

    def _flank_region(self, flank: Interval) -> Region:
        return self.original_region.trim_to_extension(flank, self.original_region.extension)


# =============================================================================
# Trimmer
# =============================================================================


class RegionTrimmer:
    """Computes variant-covering spans and non-variant flanks for regions.

    Holds only configuration, so one instance may trim distinct regions
    from several workers at once.

    Attributes:
        variant_padding: Bases of padding around the variant span.
        disable_trimming: Keep whole regions whenever they hold variants.
        cap_to_extension: Limit the padded span to the region's own span
            expanded by its extension.

    Example:
        >>> trimmer = RegionTrimmer(lengths, variant_padding=20)
        >>> result = trimmer.trim(region, [Variant("chr1", 50, 50)])
        >>> result.left_flank, result.right_flank
        (Interval(contig='chr1', start=1, end=29), Interval(contig='chr1', start=71, end=100))
    """

    def __init__(
        self,
        contig_lengths: ContigLengths,
        variant_padding: int,
        disable_trimming: bool = False,
        cap_to_extension: bool = False,
    ) -> None:
        """Initialize the trimmer.

        Args:
            contig_lengths: Lookup used to clamp the padded span.
            variant_padding: Bases of padding around the variant span.
            disable_trimming: Return NO_TRIMMING results for regions with
                variants.
            cap_to_extension: Intersect the padded span with the region
                expanded by its extension.

        Raises:
            ValueError: If padding is negative.
        """
        if variant_padding < 0:
            raise ValueError(f"variant_padding must be >= 0, got {variant_padding}")

        self._contig_lengths = contig_lengths
        self.variant_padding = variant_padding
        self.disable_trimming = disable_trimming
        self.cap_to_extension = cap_to_extension

    @classmethod
    def from_config(cls, contig_lengths: ContigLengths, config: TrimmingConfig) -> RegionTrimmer:
        return cls(
            contig_lengths,
            variant_padding=config.variant_padding,
            disable_trimming=config.disable_trimming,
            cap_to_extension=config.cap_to_extension,
        )

    def trim(self, region: Region, variants: Iterable[VariantLike]) -> TrimResult:
        """Split a region into a callable core and non-variant flanks.

        Args:
            region: Region to trim.
            variants: Variants sorted by position. Those not overlapping the
                region's primary span are ignored.

        Returns:
            The trimming result.
        """
        events = [v for v in variants if _variant_interval(v).overlaps(region.span)]

        if not events:
            logger.debug(f"No variation in {region.span}")
            return TrimResult.no_variation(region)
        if self.disable_trimming:
            return TrimResult.no_trimming(region, events)

        contig = region.contig
        variant_span = Interval(
            contig,
            min(v.start for v in events),
            max(v.end for v in events),
        )
        contig_length = self._contig_lengths.contig_length(contig)
        padded_span = variant_span.expand_within_contig(self.variant_padding, contig_length)

        if self.cap_to_extension:
            maximum_span = region.span.expand_within_contig(region.extension, contig_length)
            padded_span = maximum_span.intersect(padded_span).merge_with_contiguous(variant_span)

        if not padded_span.contains(variant_span):
            raise ValueError(f"Padded span {padded_span} does not contain {variant_span}")

        left_flank = (
            Interval(contig, region.start, padded_span.start - 1)
            if region.start < padded_span.start
            else None
        )
        right_flank = (
            Interval(contig, padded_span.end + 1, region.end)
            if region.end > padded_span.end
            else None
        )

        logger.debug(
            f"Trimmed {region.span}: {len(events)} events, variant span {variant_span}, "
            f"padded {padded_span}, flanks {left_flank} / {right_flank}"
        )

        return TrimResult(
            region,
            TrimOutcome.TRIMMED,
            events,
            variant_span=variant_span,
            extended_span=padded_span,
            left_flank=left_flank,
            right_flank=right_flank,
        )
