"""Pytest configuration and shared fixtures for regionforge tests.

Fixtures are organized by category:

- Coordinate fixtures: contig lengths and factories for states/regions
- Record fixtures: reads and variants
- File fixtures: synthetic FASTA written to tmp_path
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from regionforge.core.activity import ActivityState
from regionforge.core.region import Region
from regionforge.io.fasta import SequenceDictionary
from regionforge.io.reads import AlignedRead
from regionforge.utils.intervals import Interval


# =============================================================================
# Coordinate Fixtures
# =============================================================================


@pytest.fixture
def contig_lengths() -> SequenceDictionary:
    """Two small contigs.

    - chr1: 1000 bp
    - chr2: 500 bp
    """
    return SequenceDictionary({"chr1": 1000, "chr2": 500})


@pytest.fixture
def make_states() -> Callable[..., list[ActivityState]]:
    """Factory for contiguous activity states from a list of probabilities."""

    def _make(probs: list[float], contig: str = "chr1", start: int = 1) -> list[ActivityState]:
        return [
            ActivityState.at(contig, start + offset, prob)
            for offset, prob in enumerate(probs)
        ]

    return _make


@pytest.fixture
def make_region(contig_lengths: SequenceDictionary) -> Callable[..., Region]:
    """Factory for read-free regions on the shared contigs."""

    def _make(
        start: int,
        end: int,
        extension: int = 0,
        is_active: bool = True,
        contig: str = "chr1",
    ) -> Region:
        return Region(Interval(contig, start, end), is_active, extension, contig_lengths)

    return _make


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def make_read() -> Callable[..., AlignedRead]:
    """Factory for aligned reads."""
    counter = iter(range(1_000_000))

    def _make(start: int, end: int, contig: str = "chr1", name: str | None = None) -> AlignedRead:
        return AlignedRead(name or f"read{next(counter)}", contig, start, end)

    return _make


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def synthetic_fasta(tmp_path: Path) -> Path:
    """Create a synthetic FASTA file for testing.

    Creates a small genome with two contigs:
    - chr1: 1000 bp
    - chr2: 500 bp
    """
    fasta_path = tmp_path / "test_genome.fa"

    rng = np.random.default_rng(42)
    sequences = {
        "chr1": "".join(rng.choice(list("ACGT"), 1000)),
        "chr2": "".join(rng.choice(list("ACGT"), 500)),
    }

    with open(fasta_path, "w") as f:
        for contig, seq in sequences.items():
            f.write(f">{contig}\n")
            # Write in 80-character lines
            for i in range(0, len(seq), 80):
                f.write(seq[i : i + 80] + "\n")

    return fasta_path
