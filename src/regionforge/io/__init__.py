"""Input handlers for regionforge.

- fasta: Contig lengths and reference bases (pyfaidx)
- reads: Aligned reads from BAM (pysam)
- variants: Variants from VCF (pysam)
"""

from regionforge.io.fasta import GenomeAccessor, SequenceDictionary
from regionforge.io.reads import AlignedRead, ReadSource, fetch_reads
from regionforge.io.variants import Variant, VariantSource, fetch_variants

__all__ = [
    "GenomeAccessor",
    "SequenceDictionary",
    "AlignedRead",
    "ReadSource",
    "Variant",
    "VariantSource",
    "fetch_reads",
    "fetch_variants",
]
