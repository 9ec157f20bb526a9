"""Interfaces of the collaborators consumed by the region core.

The core never loads references, reads or variants itself. Anything with
the attributes below can be handed to it; :mod:`regionforge.io` provides
concrete implementations backed by pyfaidx and pysam.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContigLengths(Protocol):
    """Lookup of contig lengths, used to clamp spans to valid coordinates."""

    def contig_length(self, contig: str) -> int: ...


@runtime_checkable
class ReadLike(Protocol):
    """An aligned record with a 1-based inclusive reference span.

    ``clip_to_interval`` returns a new record truncated to the bounds; the
    result may be empty (``is_empty`` true) if nothing remains.
    """

    contig: str
    start: int
    end: int

    @property
    def is_empty(self) -> bool: ...

    def clip_to_interval(self, start: int, end: int) -> ReadLike: ...


@runtime_checkable
class VariantLike(Protocol):
    """A point or short-span observation on the reference."""

    contig: str
    start: int
    end: int
