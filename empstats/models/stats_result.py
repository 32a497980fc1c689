from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .employee import EmployeeRecord
from .row_data import RawRow

"""Result models for the statistic processor.

StatsResult is the single value a parse-and-process run produces. It is
built from scratch on every run and never merged with an earlier one.
"""

__all__ = [
    "DIMENSIONS",
    "NOT_FOUND",
    "NO_WINNER_NAME",
    "DistributionEntry",
    "Winner",
    "StatsResult",
]

# Marker for winner fields when no ranked row matched a stored employee
NOT_FOUND = "N/A"
NO_WINNER_NAME = "No valid winner found"

DIMENSIONS: tuple[str, ...] = ("department", "site", "directorate", "grouping")

# Fields shown in the winner block, in display order
WINNER_FIELDS: tuple[str, ...] = ("empid", "empname", "department", "site", "directorate", "uid")


@dataclass(frozen=True)
class DistributionEntry:
    label: str
    count: int
    percentage: str  # e.g. "50.00%"


@dataclass(frozen=True)
class Winner:
    """Winning employee, or the placeholder when nobody in the top ranks matched.

    rank is 1-based over parsed rows; None marks the placeholder.
    """
    record: EmployeeRecord
    rank: int | None = None

    @property
    def found(self) -> bool:
        return self.rank is not None

    @classmethod
    def placeholder(cls, display_name: str | None = None) -> Winner:
        record = EmployeeRecord(
            empid=NOT_FOUND,
            empname=display_name or NO_WINNER_NAME,
            classification=NOT_FOUND,
            division=NOT_FOUND,
            department=NOT_FOUND,
            site=NOT_FOUND,
            directorate=NOT_FOUND,
            uid=NOT_FOUND,
            grouping=NOT_FOUND,
        )
        return cls(record=record, rank=None)

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self.record, name) for name in WINNER_FIELDS}


@dataclass(frozen=True)
class StatsResult:
    winner: Winner
    distributions: dict[str, list[DistributionEntry]]
    total_parsed_rows: int
    total_resolved_rows: int
    raw_rows: list[RawRow] = field(default_factory=list)
    resolved_records: list[EmployeeRecord] = field(default_factory=list)
    malformed_rows: int = 0

    def distribution(self, dimension: str) -> list[DistributionEntry]:
        return self.distributions.get(dimension, [])

    def to_dict(self) -> dict[str, Any]:
        """Presentation shape: winner block, one list per dimension, audit tables."""
        out: dict[str, Any] = {"winner": self.winner.to_dict()}
        for dimension in DIMENSIONS:
            out[f"{dimension}Distribution"] = [
                {dimension: e.label, "count": e.count, "percentage": e.percentage}
                for e in self.distribution(dimension)
            ]
        out["totalParsedRows"] = self.total_parsed_rows
        out["totalResolvedRows"] = self.total_resolved_rows
        out["actualData"] = [r.to_dict() for r in self.resolved_records]
        out["rawData"] = [dict(r.values) for r in self.raw_rows]
        return out
