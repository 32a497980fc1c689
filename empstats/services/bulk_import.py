from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..db.employee_store import EmployeeStore
from ..excel.reader import normalize_sheet, read_employee_sheet
from ..logging.error_log import ErrorRecord, ImportErrorLog
from ..models.config_models import DEFAULT_REQUIRED_COLUMNS
from ..models.employee import IMPORT_COLUMNS
from ..models.processing_result import ImportResult
from .progress import ProgressTracker

"""Bulk employee import from an upload workbook.

Flow:
1. Read the first sheet and check the required columns exist (fatal if not)
2. Load the empids already stored
3. Per row: reject rows missing required values, skip known empids
   (including ones seen earlier in the same workbook)
4. Insert the remaining rows in one batch, falling back to row by row
5. Write row errors, in sheet order, to the JSON Lines error log
"""

logger = logging.getLogger(__name__)


def _prepare(row: dict[str, Any]) -> dict[str, str]:
    # optional columns are stored as empty strings, never NULL
    return {c: (row.get(c) or "") for c in IMPORT_COLUMNS}


def import_employees(
    path: Path,
    store: EmployeeStore,
    required_columns: Sequence[str] = DEFAULT_REQUIRED_COLUMNS,
    error_log: ImportErrorLog | None = None,
) -> ImportResult:
    """Import employees from `path` into the store.

    Raises:
        ImportFileError: workbook unreadable, empty, or missing columns
        LookupFailedError: existing empids could not be loaded
    """
    error_log = error_log if error_log is not None else ImportErrorLog()
    # empid drives duplicate detection, so it is always required
    required_columns = tuple(dict.fromkeys(("empid", *required_columns)))
    sheet_name, df = read_employee_sheet(path)
    sheet = normalize_sheet(df, sheet_name, required_columns=required_columns)
    logger.info("importing %d rows from %s (sheet %s)", len(sheet.rows), path.name, sheet_name)

    known = store.existing_empids()

    processed = 0
    skipped = 0
    pending: list[dict[str, str]] = []
    pending_rows: list[int] = []
    row_errors: list[ErrorRecord] = []

    with ProgressTracker(len(sheet.rows), description=f"Reading {path.name}") as progress:
        for row in sheet.rows:
            processed += 1
            progress.advance()
            missing = [c for c in required_columns if not row.get(c)]
            if missing:
                row_errors.append(
                    ErrorRecord.create(
                        source=path.name,
                        row=processed,
                        error_type="MISSING_FIELDS",
                        message=f"Missing {', '.join(missing)}",
                    )
                )
                continue
            empid = str(row["empid"])
            if empid in known:
                skipped += 1
                continue
            known.add(empid)
            pending.append(_prepare(row))
            pending_rows.append(processed)

    outcome = store.insert_employees(pending, IMPORT_COLUMNS)
    for index, message in outcome.failures.items():
        row_errors.append(
            ErrorRecord.create(
                source=path.name,
                row=pending_rows[index],
                error_type="DATABASE_INSERT_ERROR",
                message=f"Database error - {message}",
            )
        )

    records = sorted(row_errors, key=lambda r: r.row)
    log_path = error_log.write(records)
    error_details = [r.describe() for r in records]
    for detail in error_details:
        logger.warning("%s: %s", path.name, detail)

    return ImportResult(
        source=path.name,
        processed=processed,
        added=outcome.inserted,
        skipped=skipped,
        errors=len(records),
        error_details=error_details,
        error_log_path=log_path,
    )
