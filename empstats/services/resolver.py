from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from empstats.models.employee import EmployeeRecord
from empstats.models.row_data import NOT_AVAILABLE, RawRow
from empstats.models.stats_result import Winner

"""Record resolver: join pasted rows to stored employees.

Join keys come from one designated column of the pasted rows. All keys go
to the store in a single bulk lookup; the winner is then picked from the
fetched set by trying the top-ranked rows in order.
"""

__all__ = [
    "RecordLookup",
    "Resolution",
    "extract_join_keys",
    "index_by_uid",
    "pick_winner",
    "resolve_records",
]

logger = logging.getLogger(__name__)


class RecordLookup(Protocol):
    def fetch_by_uids(self, uids: Sequence[str]) -> list[EmployeeRecord]: ...


@dataclass(frozen=True)
class Resolution:
    records: list[EmployeeRecord]
    winner: Winner
    join_keys: list[str]


def extract_join_keys(rows: Iterable[RawRow], header: str) -> list[str]:
    """Distinct available join keys in first-seen order."""
    keys: dict[str, None] = {}
    for row in rows:
        key = row.cell(header)
        if key != NOT_AVAILABLE:
            keys.setdefault(key, None)
    return list(keys)


def index_by_uid(records: Iterable[EmployeeRecord]) -> dict[str, EmployeeRecord]:
    """uid -> record; with duplicate uids the first fetched record wins."""
    table: dict[str, EmployeeRecord] = {}
    for record in records:
        if record.uid is not None:
            table.setdefault(record.uid, record)
    return table


def pick_winner(
    candidates: Sequence[str | None],
    table: dict[str, EmployeeRecord],
    placeholder_name: str | None = None,
) -> Winner:
    """First candidate key present in `table`, else the placeholder winner.

    candidates are in rank order; position 0 is rank one.
    """
    for rank, key in enumerate(candidates, start=1):
        if key is None or key == NOT_AVAILABLE:
            continue
        record = table.get(key)
        if record is not None:
            return Winner(record=record, rank=rank)
    return Winner.placeholder(placeholder_name)


def resolve_records(
    rows: Sequence[RawRow],
    lookup: RecordLookup,
    join_key_header: str = "Player",
    display_name_header: str = "Player Name",
    rank_depth: int = 3,
) -> Resolution:
    """Fetch the employees behind `rows` and resolve the winner.

    Raises whatever the lookup raises (LookupFailedError for EmployeeStore).
    """
    keys = extract_join_keys(rows, join_key_header)
    records = lookup.fetch_by_uids(keys)
    logger.info("resolved %d of %d player ids", len(records), len(keys))

    ranked = rows[:rank_depth]
    candidates = [row.cell(join_key_header) for row in ranked]
    placeholder_name = None
    if ranked:
        name = ranked[0].cell(display_name_header)
        placeholder_name = None if name == NOT_AVAILABLE else name

    winner = pick_winner(candidates, index_by_uid(records), placeholder_name)
    if not winner.found:
        logger.warning("none of the top %d rows matched a stored employee", len(ranked))
    return Resolution(records=records, winner=winner, join_keys=keys)
