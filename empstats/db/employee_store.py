from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import psycopg2

from empstats.models.employee import EMPLOYEE_COLUMNS, EmployeeRecord

from .batch_insert import BatchInsertError, batch_insert

"""Employee record store over a psycopg2 cursor.

Every query the tool issues against the employees table lives here. Reads
return EmployeeRecord objects; driver errors are wrapped so callers only
deal with StoreError subclasses (and BatchInsertError for inserts).
"""

__all__ = [
    "StoreError",
    "LookupFailedError",
    "InsertOutcome",
    "EmployeeStore",
]

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for record store failures."""


class LookupFailedError(StoreError):
    """The store was unreachable or rejected a read query."""


@dataclass(frozen=True)
class InsertOutcome:
    inserted: int
    failures: dict[int, str] = field(default_factory=dict)  # row index -> db message


def _select_list() -> str:
    return ", ".join(f'"{c}"' for c in EMPLOYEE_COLUMNS)


class EmployeeStore:
    def __init__(self, cursor: Any, table: str = "employees") -> None:
        self.cursor = cursor
        self.table = table

    def _read(self, sql: str, params: Sequence[Any] | None = None) -> list[Any]:
        try:
            self.cursor.execute(sql, params)
            return list(self.cursor.fetchall())
        except psycopg2.Error as e:
            raise LookupFailedError(f"query on {self.table} failed: {str(e).strip()}") from e

    def _records(self, sql: str, params: Sequence[Any] | None = None) -> list[EmployeeRecord]:
        return [EmployeeRecord.from_row(r) for r in self._read(sql, params)]

    # -- statistic processor -------------------------------------------------

    def fetch_by_uids(self, uids: Sequence[str]) -> list[EmployeeRecord]:
        """All employees whose uid is in `uids`, one bulk query.

        No ordering is applied. An empty key set returns [] without querying.
        """
        keys = tuple(uids)
        if not keys:
            return []
        sql = f'SELECT {_select_list()} FROM {self.table} WHERE "uid" IN %s'
        records = self._records(sql, (keys,))
        logger.debug("fetch_by_uids keys=%d matched=%d", len(keys), len(records))
        return records

    # -- directory search ----------------------------------------------------

    def search(
        self,
        uid_query: str | None = None,
        empid_query: str | None = None,
        site: str | None = None,
    ) -> list[EmployeeRecord]:
        """Employees holding a UID, optionally filtered, ordered by name.

        uid_query is a case-insensitive substring; empid_query matches the
        number exactly when numeric, otherwise as a text substring.
        """
        clauses = ['"uid" IS NOT NULL', "\"uid\" <> ''"]
        params: list[Any] = []
        if uid_query and uid_query.strip():
            clauses.append('"uid" ILIKE %s')
            params.append(f"%{uid_query.strip()}%")
        if empid_query and empid_query.strip():
            value = empid_query.strip()
            if value.isdigit():
                clauses.append('"empid" = %s')
                params.append(int(value))
            else:
                clauses.append('CAST("empid" AS TEXT) LIKE %s')
                params.append(f"%{value}%")
        if site:
            clauses.append('"site" = %s')
            params.append(site)
        sql = (
            f"SELECT {_select_list()} FROM {self.table} "
            f"WHERE {' AND '.join(clauses)} ORDER BY \"empname\""
        )
        return self._records(sql, params)

    def list_sites(self) -> list[str]:
        sql = (
            f'SELECT DISTINCT "site" FROM {self.table} '
            "WHERE \"site\" IS NOT NULL AND \"site\" <> '' ORDER BY \"site\""
        )
        return [r[0] for r in self._read(sql)]

    # -- export --------------------------------------------------------------

    def count_with_uid(self) -> int:
        rows = self._read(f'SELECT COUNT(*) FROM {self.table} WHERE "uid" IS NOT NULL')
        return int(rows[0][0]) if rows else 0

    def fetch_page(self, page: int, page_size: int) -> list[EmployeeRecord]:
        """One page of employees holding a UID, ordered by empid."""
        sql = (
            f'SELECT {_select_list()} FROM {self.table} WHERE "uid" IS NOT NULL '
            'ORDER BY "empid" ASC LIMIT %s OFFSET %s'
        )
        return self._records(sql, (page_size, page * page_size))

    # -- import / maintenance ------------------------------------------------

    def existing_empids(self) -> set[str]:
        return {str(r[0]) for r in self._read(f'SELECT "empid" FROM {self.table}')}

    def insert_employees(
        self, rows: Sequence[Mapping[str, Any]], columns: Sequence[str]
    ) -> InsertOutcome:
        """Insert rows in one batch; on failure retry row by row.

        Each attempt runs under a savepoint so a rejected row does not abort
        the surrounding transaction.
        """
        values = [[row.get(c) for c in columns] for row in rows]
        if not values:
            return InsertOutcome(inserted=0)

        self.cursor.execute("SAVEPOINT empstats_batch")
        try:
            result = batch_insert(self.cursor, self.table, columns, values)
            self.cursor.execute("RELEASE SAVEPOINT empstats_batch")
            return InsertOutcome(inserted=result.inserted_rows)
        except BatchInsertError as e:
            logger.warning("batch insert failed, retrying row by row: %s", e)
            self.cursor.execute("ROLLBACK TO SAVEPOINT empstats_batch")

        inserted = 0
        failures: dict[int, str] = {}
        for index, row_values in enumerate(values):
            self.cursor.execute("SAVEPOINT empstats_row")
            try:
                batch_insert(self.cursor, self.table, columns, [row_values])
            except BatchInsertError as e:
                self.cursor.execute("ROLLBACK TO SAVEPOINT empstats_row")
                failures[index] = str(e)
                continue
            self.cursor.execute("RELEASE SAVEPOINT empstats_row")
            inserted += 1
        self.cursor.execute("RELEASE SAVEPOINT empstats_batch")
        return InsertOutcome(inserted=inserted, failures=failures)

    def clear_credentials(self, empid: Any) -> int:
        """Null out uid and password for one employee; returns rows touched."""
        sql = f'UPDATE {self.table} SET "uid" = NULL, "password" = NULL WHERE "empid" = %s'
        try:
            self.cursor.execute(sql, (empid,))
        except psycopg2.Error as e:
            raise StoreError(f"update on {self.table} failed: {str(e).strip()}") from e
        return self.cursor.rowcount
