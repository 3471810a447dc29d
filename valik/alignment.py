"""Pairwise alignment rows and the summaries written for local matches."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TextIO

__all__ = [
    "GAP",
    "AlignmentRow",
    "get_cigar_line",
    "analyze_alignment",
    "compute_identity",
    "write_disabled_queries",
]

GAP = "-"


@dataclass(frozen=True)
class AlignmentRow:
    """One row of a pairwise alignment.

    ``gapped`` is the aligned view, with ``-`` for gaps. Its non-gap
    characters are ``source[begin:]`` in order, so ``begin`` is the position
    in ``source`` where the aligned part starts.
    """

    source: str
    gapped: str
    begin: int = 0

    def __post_init__(self) -> None:
        if self.begin < 0:
            raise ValueError("begin position must not be negative")
        residues = self.gapped.replace(GAP, "")
        end = self.begin + len(residues)
        if end > len(self.source) or self.source[self.begin:end] != residues:
            raise ValueError("aligned characters do not match the source sequence")

    def __len__(self) -> int:
        return len(self.gapped)

    def __getitem__(self, pos: int) -> str:
        return self.gapped[pos]

    def is_gap(self, pos: int) -> bool:
        """Whether alignment column ``pos`` holds a gap in this row."""
        return self.gapped[pos] == GAP

    def clipped_begin(self) -> int:
        """Source position of the first aligned character."""
        return self.begin

    @property
    def end(self) -> int:
        """Source position just past the last aligned character."""
        return self.begin + len(self.gapped) - self.gapped.count(GAP)


def _check_lengths(row0: AlignmentRow, row1: AlignmentRow) -> None:
    if len(row0) != len(row1):
        raise ValueError("alignment rows differ in length")


def get_cigar_line(row0: AlignmentRow, row1: AlignmentRow) -> tuple[str, str]:
    """Return the CIGAR string and the mutation list of an alignment.

    ``row0`` is the database row and ``row1`` the query row. Mutations are
    listed as the 1-based query position followed by the query base, for
    every mismatch and every inserted query base, separated by commas.
    """
    _check_lengths(row0, row1)
    end = len(row0)
    cigar: list[str] = []
    mutations: list[str] = []
    pos = 0
    read_pos = 0
    read_base_pos = row1.clipped_begin()

    while pos < end:
        if row0.is_gap(pos) and row1.is_gap(pos):
            raise ValueError(f"alignment column {pos} is a gap in both rows")

        matched = 0
        while pos < end and not row0.is_gap(pos) and not row1.is_gap(pos):
            read_pos += 1
            if row0[pos] != row1[pos]:
                mutations.append(f"{read_pos}{row1.source[read_base_pos]}")
            read_base_pos += 1
            pos += 1
            matched += 1
        if matched:
            cigar.append(f"{matched}M")

        deleted = 0
        while pos < end and row1.is_gap(pos) and not row0.is_gap(pos):
            pos += 1
            deleted += 1
        if deleted:
            cigar.append(f"{deleted}D")

        inserted = 0
        while pos < end and row0.is_gap(pos) and not row1.is_gap(pos):
            pos += 1
            read_pos += 1
            mutations.append(f"{read_pos}{row1.source[read_base_pos]}")
            read_base_pos += 1
            inserted += 1
        if inserted:
            cigar.append(f"{inserted}I")

    return "".join(cigar), ",".join(mutations)


def analyze_alignment(row0: AlignmentRow, row1: AlignmentRow) -> tuple[int, int]:
    """Return the alignment length and the number of matching columns."""
    _check_lengths(row0, row1)
    matches = sum(
        1
        for a, b in zip(row0.gapped, row1.gapped)
        if a != GAP and b != GAP and a == b
    )
    return max(len(row0), len(row1)), matches


def compute_identity(row0: AlignmentRow, row1: AlignmentRow) -> float:
    """Percentage of matching columns, truncated to four decimal places."""
    ali_len, matches = analyze_alignment(row0, row1)
    if ali_len == 0:
        raise ValueError("cannot compute the identity of an empty alignment")
    return math.floor(1000000.0 * matches / ali_len) / 10000.0


def write_disabled_queries(
    disabled_query_ids: Iterable[int],
    ids: Sequence[str],
    queries: Sequence[str],
    stream: TextIO,
) -> None:
    """Write the queries at the given indices to ``stream`` as FASTA records."""
    for query_id in disabled_query_ids:
        stream.write(f">{ids[query_id]}\n")
        stream.write(f"{queries[query_id]}\n\n")