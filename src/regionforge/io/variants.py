"""Variant records and VCF access.

Variants are the point observations a region is trimmed around. They are
produced upstream (assembly/genotyping); this module only carries their
reference footprint and reads them back from VCF with pysam.

Example:
    >>> from regionforge.io.variants import VariantSource
    >>> with VariantSource("calls.vcf.gz") as source:
    ...     events = list(source.fetch(region.span))
    >>> result = trimmer.trim(region, events)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator

import attrs
import pysam

from regionforge.utils.intervals import Interval
from regionforge.utils.regions import coerce_region

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================


@attrs.define(frozen=True, slots=True, order=True)
class Variant:
    """Reference footprint of a variant.

    Ordered by ``(contig, start, end)``, which is the order the trimmer
    expects its input in.

    Attributes:
        contig: Contig name.
        start: First reference base (1-based, inclusive).
        end: Last reference base (1-based, inclusive).
        ref: Reference allele.
        alts: Alternate alleles.
    """

    contig: str
    start: int
    end: int
    ref: str = attrs.field(default="N", order=False)
    alts: tuple[str, ...] = attrs.field(default=(), converter=tuple, order=False)

    @property
    def interval(self) -> Interval:
        return Interval(self.contig, self.start, self.end)

    @classmethod
    def from_record(cls, record: pysam.VariantRecord) -> Variant:
        """Build a variant from a pysam VCF record."""
        return cls(
            contig=record.chrom,
            start=record.pos,
            # 0-based exclusive stop == 1-based inclusive end
            end=record.stop,
            ref=record.ref,
            alts=record.alts or (),
        )


# =============================================================================
# VCF Reader
# =============================================================================


class VariantSource:
    """Read variants from a VCF/BCF file.

    Region queries need a tabix or CSI index; :meth:`__iter__` does not.

    Attributes:
        path: Path to the VCF file.
    """

    def __init__(self, vcf_path: Path | str) -> None:
        """Initialize the variant source.

        Raises:
            FileNotFoundError: If VCF file doesn't exist.
        """
        self.path = Path(vcf_path)
        if not self.path.exists():
            raise FileNotFoundError(f"VCF file not found: {self.path}")

        self._vcf: pysam.VariantFile | None = None
        self._open()

    def _open(self) -> None:
        self._vcf = pysam.VariantFile(str(self.path))
        logger.info(f"Opened VCF file: {self.path.name}")

    def __enter__(self) -> VariantSource:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._vcf is not None:
            self._vcf.close()
            self._vcf = None

    def __iter__(self) -> Iterator[Variant]:
        if self._vcf is None:
            raise RuntimeError("VCF file not open")
        for record in self._vcf:
            yield Variant.from_record(record)

    def fetch(self, region: Interval | str) -> Iterator[Variant]:
        """Yield variants overlapping a region, in file order.

        Args:
            region: Interval or region string (1-based inclusive).
        """
        if self._vcf is None:
            raise RuntimeError("VCF file not open")

        interval = coerce_region(region)
        for record in self._vcf.fetch(interval.contig, interval.start - 1, interval.end):
            yield Variant.from_record(record)


def fetch_variants(vcf_path: Path | str, region: Interval | str) -> list[Variant]:
    """Convenience function to load the variants overlapping a region."""
    with VariantSource(vcf_path) as source:
        variants = list(source.fetch(region))
    logger.debug(f"Loaded {len(variants)} variants in {region}")
    return variants
