from __future__ import annotations

import logging
from dataclasses import dataclass

from empstats.models.row_data import NOT_AVAILABLE, RawRow

"""Reader for pasted tab-separated leaderboard text.

The first line is the header and is taken as-is (trimmed tokens, no
validation). Every later line becomes one RawRow keyed by those headers:

- missing trailing cells and empty cells read as NOT_AVAILABLE
- cells beyond the header width are dropped
- in lenient mode a ragged line is flagged `malformed` and kept;
  in strict mode it raises MalformedRowError
"""

__all__ = [
    "EmptyInputError",
    "MalformedRowError",
    "ParsedText",
    "parse_tabular_text",
    "require_text",
]

logger = logging.getLogger(__name__)


class EmptyInputError(Exception):
    """Raised when no text (or only whitespace) was supplied."""


class MalformedRowError(Exception):
    """A data line's cell count differs from the header's."""

    def __init__(self, line_number: int, expected: int, actual: int) -> None:
        self.line_number = line_number
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"line {line_number}: expected {expected} cells, got {actual}"
        )


@dataclass(frozen=True)
class ParsedText:
    headers: list[str]
    rows: list[RawRow]

    @property
    def malformed_rows(self) -> list[RawRow]:
        return [r for r in self.rows if r.malformed]


def _split_cells(line: str) -> list[str]:
    return line.split("\t")


def require_text(text: str | None) -> str:
    """Return `text` unchanged, raising EmptyInputError when there is nothing to parse."""
    if text is None or not text.strip():
        raise EmptyInputError("no data supplied: paste the leaderboard text first")
    return text


def parse_tabular_text(text: str | None, *, lenient: bool = True) -> ParsedText:
    """Parse pasted text into header names and RawRows.

    Parameters
    ----------
    text: whole pasted block, newline separated rows, tab separated cells
    lenient: pad/truncate ragged rows (True) or raise MalformedRowError (False)

    Raises
    ------
    EmptyInputError: text is None, empty or whitespace only
    MalformedRowError: strict mode only
    """
    text = require_text(text)

    # rows end at "\n" only; a stray "\r" is trimmed with the cell
    lines = text.strip().split("\n")
    headers = [h.strip() for h in _split_cells(lines[0])]
    width = len(headers)

    rows: list[RawRow] = []
    for line_number, line in enumerate(lines[1:], start=1):
        cells = _split_cells(line)
        malformed = len(cells) != width
        if malformed:
            if not lenient:
                raise MalformedRowError(line_number, width, len(cells))
            logger.warning(
                "line %d has %d cells for %d headers; missing cells read as %s",
                line_number,
                len(cells),
                width,
                NOT_AVAILABLE,
            )
        values: dict[str, str] = {}
        for index, header in enumerate(headers):
            cell = cells[index].strip() if index < len(cells) else ""
            values[header] = cell or NOT_AVAILABLE
        rows.append(RawRow(line_number=line_number, values=values, malformed=malformed))

    logger.debug("parsed %d rows with headers=%s", len(rows), headers)
    return ParsedText(headers=headers, rows=rows)
