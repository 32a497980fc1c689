from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

"""RawRow model for pasted leaderboard text.

A RawRow is one data line of the pasted text after it has been split on tabs
and keyed by the header line. Cells the line did not supply carry the
NOT_AVAILABLE sentinel so every row exposes exactly the header's fields.
"""

__all__ = [
    "NOT_AVAILABLE",
    "RawRow",
]

# Marker for a cell missing from the pasted text
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class RawRow(Mapping[str, str]):
    """Immutable header -> cell mapping for a single pasted line.

    line_number is 1-based over data lines (the header is line 0).
    malformed is set when the line had a different number of cells than the
    header; the row is still usable, its missing cells are NOT_AVAILABLE and
    surplus cells are gone.
    """
    line_number: int
    values: dict[str, str]
    malformed: bool = False

    def __getitem__(self, key: str) -> str:
        return self.values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def cell(self, header: str) -> str:
        """Return the cell under header, NOT_AVAILABLE if the header is unknown."""
        return self.values.get(header, NOT_AVAILABLE)
