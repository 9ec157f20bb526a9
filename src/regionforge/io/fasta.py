"""Reference sequence access and contig-length lookup.

This module provides the contig-length collaborator used to clamp region
spans, and indexed FASTA access for pulling the reference bases under a
region.

Features:
    - Mapping-backed sequence dictionary
    - Random access to sequences by 1-based inclusive region
    - Coordinate validation

Example:
    >>> from regionforge.io.fasta import GenomeAccessor, SequenceDictionary
    >>> lengths = SequenceDictionary({"chr1": 248_956_422})
    >>> lengths.contig_length("chr1")
    248956422
    >>> genome = GenomeAccessor("genome.fa")
    >>> seq = genome.get_sequence("chr1", 1000, 2000)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

import pyfaidx

logger = logging.getLogger(__name__)


# =============================================================================
# Sequence Dictionary
# =============================================================================


class SequenceDictionary:
    """Ordered mapping of contig names to lengths.

    Attributes:
        contigs: Contig names in insertion order.

    Example:
        >>> lengths = SequenceDictionary({"chr1": 1000, "chr2": 500})
        >>> "chr2" in lengths
        True
        >>> lengths.contig_length("chr2")
        500
    """

    def __init__(self, lengths: Mapping[str, int] | Iterable[tuple[str, int]]) -> None:
        items = lengths.items() if isinstance(lengths, Mapping) else lengths
        self._lengths: dict[str, int] = {}
        for contig, length in items:
            if length < 1:
                raise ValueError(f"Contig {contig} must have length >= 1, got {length}")
            if contig in self._lengths:
                raise ValueError(f"Duplicate contig in sequence dictionary: {contig}")
            self._lengths[contig] = int(length)

    def __repr__(self) -> str:
        return f"SequenceDictionary({len(self._lengths)} contigs)"

    def __contains__(self, contig: object) -> bool:
        return contig in self._lengths

    def __len__(self) -> int:
        return len(self._lengths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lengths)

    @property
    def contigs(self) -> list[str]:
        return list(self._lengths)

    def contig_length(self, contig: str) -> int:
        """Get the length of a contig.

        Raises:
            KeyError: If the contig is unknown.
        """
        try:
            return self._lengths[contig]
        except KeyError:
            raise KeyError(f"Unknown contig: {contig}") from None

    def to_dict(self) -> dict[str, int]:
        return dict(self._lengths)


# =============================================================================
# Main Accessor Class
# =============================================================================


class GenomeAccessor:
    """Indexed FASTA access using pyfaidx.

    Doubles as a contig-length lookup, so it can be handed straight to
    :class:`~regionforge.core.region.Region` and friends.

    Attributes:
        path: Path to the FASTA file.

    Example:
        >>> with GenomeAccessor("genome.fa") as genome:
        ...     seq = genome.get_sequence("chr1", 1000, 2000)
    """

    def __init__(self, fasta_path: Path | str) -> None:
        """Initialize the genome accessor.

        Args:
            fasta_path: Path to FASTA file. Will create .fai index if needed.

        Raises:
            FileNotFoundError: If FASTA file doesn't exist.
        """
        self.path = Path(fasta_path)
        if not self.path.exists():
            raise FileNotFoundError(f"FASTA file not found: {self.path}")

        self._fasta: pyfaidx.Fasta | None = None
        self._dictionary: SequenceDictionary | None = None

        self._open()

    def _open(self) -> None:
        """Open the FASTA file with pyfaidx."""
        # pyfaidx will create index if it doesn't exist
        self._fasta = pyfaidx.Fasta(
            str(self.path),
            sequence_always_upper=False,  # Preserve case for soft-masking
            rebuild=False,
        )
        self._dictionary = SequenceDictionary(
            (name, len(self._fasta[name])) for name in self._fasta.keys()
        )

        logger.info(
            f"Opened FASTA: {self.path.name}, "
            f"{len(self._dictionary)} contigs"
        )

    def __enter__(self) -> GenomeAccessor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the FASTA file."""
        if self._fasta is not None:
            self._fasta.close()
            self._fasta = None

    @property
    def sequence_dictionary(self) -> SequenceDictionary:
        if self._dictionary is None:
            raise RuntimeError("FASTA file not opened")
        return self._dictionary

    def contig_length(self, contig: str) -> int:
        return self.sequence_dictionary.contig_length(contig)

    def get_sequence(self, contig: str, start: int, end: int) -> str:
        """Get sequence for region (1-based, inclusive coordinates).

        Args:
            contig: Contig name.
            start: Start position (1-based, inclusive).
            end: End position (1-based, inclusive).

        Returns:
            Sequence string.

        Raises:
            KeyError: If contig not in FASTA.
            ValueError: If coordinates are invalid.
        """
        if self._fasta is None:
            raise RuntimeError("FASTA file not opened")

        contig_length = self.contig_length(contig)
        if start < 1:
            raise ValueError(f"Start position must be >= 1: {start}")
        if end > contig_length:
            raise ValueError(f"End position {end} exceeds contig length {contig_length}")
        if start > end:
            raise ValueError(f"Start ({start}) must be <= end ({end})")

        # pyfaidx slices are 0-based half-open
        return str(self._fasta[contig][start - 1 : end])
