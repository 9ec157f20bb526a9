"""Unit tests for regionforge.io.fasta module.

Tests cover:
- SequenceDictionary lookups and validation
- GenomeAccessor initialization and indexing
- Sequence extraction and coordinate validation
"""

from pathlib import Path

import pytest

from regionforge.io.fasta import GenomeAccessor, SequenceDictionary


# =============================================================================
# SequenceDictionary Tests
# =============================================================================


class TestSequenceDictionary:
    """Tests for SequenceDictionary."""

    def test_from_mapping(self) -> None:
        """Build from a mapping."""
        lengths = SequenceDictionary({"chr1": 100, "chr2": 50})
        assert lengths.contig_length("chr1") == 100
        assert len(lengths) == 2
        assert "chr2" in lengths
        assert "chr3" not in lengths

    def test_from_pairs(self) -> None:
        """Build from (name, length) pairs, keeping order."""
        lengths = SequenceDictionary([("b", 10), ("a", 20)])
        assert lengths.contigs == ["b", "a"]
        assert list(lengths) == ["b", "a"]
        assert lengths.to_dict() == {"b": 10, "a": 20}

    def test_unknown_contig(self) -> None:
        """Unknown contigs raise KeyError."""
        with pytest.raises(KeyError, match="Unknown contig"):
            SequenceDictionary({"chr1": 100}).contig_length("chrUn")

    def test_invalid_length(self) -> None:
        """Lengths must be positive."""
        with pytest.raises(ValueError, match="length >= 1"):
            SequenceDictionary({"chr1": 0})

    def test_duplicate_contig(self) -> None:
        """Duplicate names are rejected."""
        with pytest.raises(ValueError, match="Duplicate"):
            SequenceDictionary([("chr1", 10), ("chr1", 20)])


# =============================================================================
# GenomeAccessor Tests
# =============================================================================


class TestGenomeAccessorInit:
    """Tests for GenomeAccessor initialization."""

    def test_init_with_valid_fasta(self, synthetic_fasta: Path) -> None:
        """Test initializing with valid FASTA file."""
        genome = GenomeAccessor(synthetic_fasta)
        assert genome.path == synthetic_fasta
        assert genome.sequence_dictionary.contigs == ["chr1", "chr2"]
        genome.close()

    def test_init_with_missing_file(self, tmp_path: Path) -> None:
        """Test initializing with non-existent file."""
        with pytest.raises(FileNotFoundError):
            GenomeAccessor(tmp_path / "nonexistent.fa")

    def test_creates_index(self, synthetic_fasta: Path) -> None:
        """Test that .fai index is created."""
        fai_path = Path(str(synthetic_fasta) + ".fai")
        assert not fai_path.exists()

        genome = GenomeAccessor(synthetic_fasta)
        assert fai_path.exists()
        genome.close()

    def test_context_manager(self, synthetic_fasta: Path) -> None:
        """Test using GenomeAccessor as context manager."""
        with GenomeAccessor(synthetic_fasta) as genome:
            assert genome.contig_length("chr1") == 1000
        with pytest.raises(RuntimeError, match="not opened"):
            genome.get_sequence("chr1", 1, 10)


class TestGenomeAccessorSequences:
    """Tests for sequence extraction."""

    def test_contig_lengths(self, synthetic_fasta: Path) -> None:
        """Lengths come from the FASTA index."""
        with GenomeAccessor(synthetic_fasta) as genome:
            assert genome.contig_length("chr1") == 1000
            assert genome.contig_length("chr2") == 500

    def test_get_sequence_inclusive(self, synthetic_fasta: Path) -> None:
        """Coordinates are 1-based inclusive."""
        with GenomeAccessor(synthetic_fasta) as genome:
            seq = genome.get_sequence("chr1", 1, 10)
            assert len(seq) == 10
            assert set(seq) <= set("ACGT")
            assert genome.get_sequence("chr1", 5, 5) == seq[4]
            assert genome.get_sequence("chr1", 3, 7) == seq[2:7]

    def test_get_sequence_contig_end(self, synthetic_fasta: Path) -> None:
        """The last base of a contig is reachable."""
        with GenomeAccessor(synthetic_fasta) as genome:
            assert len(genome.get_sequence("chr2", 491, 500)) == 10

    @pytest.mark.parametrize(
        "start,end,match",
        [
            (0, 10, "Start position"),
            (990, 1001, "exceeds contig length"),
            (20, 10, "must be <= end"),
        ],
    )
    def test_invalid_coordinates(self, synthetic_fasta: Path, start, end, match) -> None:
        """Out-of-range coordinates are rejected."""
        with GenomeAccessor(synthetic_fasta) as genome:
            with pytest.raises(ValueError, match=match):
                genome.get_sequence("chr1", start, end)

    def test_unknown_contig(self, synthetic_fasta: Path) -> None:
        """Unknown contigs raise KeyError."""
        with GenomeAccessor(synthetic_fasta) as genome:
            with pytest.raises(KeyError):
                genome.get_sequence("chrZ", 1, 10)
