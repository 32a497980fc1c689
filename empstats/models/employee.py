from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, replace
from typing import Any

"""EmployeeRecord model.

One row of the `employees` table as the statistic processor and the export
see it. Records are read-only here; writes go through EmployeeStore.
"""

__all__ = [
    "EMPLOYEE_COLUMNS",
    "IMPORT_COLUMNS",
    "EmployeeRecord",
]

# Projection used by every read query (order matters for tuple cursors)
EMPLOYEE_COLUMNS: tuple[str, ...] = (
    "empid",
    "empname",
    "classification",
    "division",
    "department",
    "site",
    "directorate",
    "uid",
    "grouping",
)

# Column order of the import template / bulk upload sheet
IMPORT_COLUMNS: tuple[str, ...] = (
    "empid",
    "empname",
    "department",
    "site",
    "classification",
    "division",
    "directorate",
    "grouping",
)


@dataclass(frozen=True)
class EmployeeRecord:
    empid: Any
    empname: str | None = None
    classification: str | None = None
    division: str | None = None
    department: str | None = None
    site: str | None = None
    directorate: str | None = None
    uid: str | None = None
    grouping: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any] | tuple[Any, ...]) -> EmployeeRecord:
        """Build a record from a dict-like row or a tuple in EMPLOYEE_COLUMNS order.

        Unknown keys (e.g. `password` when selecting `*`) are ignored.
        """
        if isinstance(row, Mapping):
            return cls(**{c: row.get(c) for c in EMPLOYEE_COLUMNS})
        return cls(**dict(zip(EMPLOYEE_COLUMNS, row, strict=False)))

    def with_categories(self, **categories: str) -> EmployeeRecord:
        return replace(self, **categories)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
