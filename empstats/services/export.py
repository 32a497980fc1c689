from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from pathlib import Path

from ..db.employee_store import EmployeeStore
from ..excel.writer import write_employees_workbook
from ..models.employee import EmployeeRecord
from ..models.processing_result import ExportResult
from .progress import ProgressTracker

"""Chunked export of every employee holding a UID to a workbook."""

logger = logging.getLogger(__name__)


class ExportError(Exception):
    pass


def export_filename(day: date) -> str:
    return f"employees_data_{day.isoformat()}.xlsx"


def export_employees(
    store: EmployeeStore,
    output_directory: Path,
    page_size: int = 1000,
    day: date | None = None,
) -> ExportResult:
    """Fetch employees page by page (ordered by empid) and write them out.

    The row count is taken first; fetching stops at the first empty page.
    A short export is logged as a warning, not an error.
    """
    if page_size < 1:
        raise ExportError(f"page_size must be positive, got {page_size}")

    start_time = datetime.now(UTC)
    expected = store.count_with_uid()
    logger.info("exporting %d employees in pages of %d", expected, page_size)

    records: list[EmployeeRecord] = []
    page = 0
    with ProgressTracker(expected, description="Exporting", unit="row") as progress:
        while True:
            batch = store.fetch_page(page, page_size)
            if not batch:
                break
            records.extend(batch)
            page += 1
            progress.advance(len(batch))

    if len(records) < expected:
        logger.warning("only exported %d of %d records", len(records), expected)

    path = Path(output_directory) / export_filename(day or start_time.date())
    try:
        write_employees_workbook(records, path)
    except OSError as e:
        raise ExportError(f"cannot write {path}: {e}") from e

    end_time = datetime.now(UTC)
    return ExportResult(
        path=path,
        expected_rows=expected,
        exported_rows=len(records),
        pages=page,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
