"""Test doubles shared across the suite."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from empstats.models.employee import EMPLOYEE_COLUMNS, EmployeeRecord


def make_employee(uid: str | None, **fields: Any) -> EmployeeRecord:
    defaults: dict[str, Any] = {
        "empid": fields.pop("empid", f"E-{uid}"),
        "empname": f"Name {uid}",
        "classification": "HO",
        "division": "TECH",
        "department": "IT",
        "site": "JAKARTA",
        "directorate": "OPS",
        "grouping": "G1",
    }
    defaults.update(fields)
    return EmployeeRecord(uid=uid, **defaults)


class FakeStore:
    """In-memory stand-in for EmployeeStore.fetch_by_uids."""

    def __init__(self, records: Sequence[EmployeeRecord] = (), error: Exception | None = None) -> None:
        self.records = list(records)
        self.error = error
        self.calls: list[list[str]] = []

    def fetch_by_uids(self, uids: Sequence[str]) -> list[EmployeeRecord]:
        self.calls.append(list(uids))
        if self.error is not None:
            raise self.error
        wanted = set(uids)
        return [r for r in self.records if r.uid in wanted]


class FakeCursor:
    """Records executed SQL and serves queued fetchall() results."""

    def __init__(self, results: Sequence[list[Any]] = (), fail_on: str | None = None,
                 error: Exception | None = None) -> None:
        self.results = list(results)
        self.executed: list[tuple[str, Any]] = []
        self.fail_on = fail_on
        self.error = error
        self.rowcount = 0

    def execute(self, sql: str, params: Any = None) -> None:
        self.executed.append((sql, params))
        if self.fail_on is not None and self.fail_on in sql and self.error is not None:
            raise self.error

    def fetchall(self) -> list[Any]:
        return self.results.pop(0) if self.results else []


def employee_row(record: EmployeeRecord) -> tuple[Any, ...]:
    return tuple(getattr(record, c) for c in EMPLOYEE_COLUMNS)
