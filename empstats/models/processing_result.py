from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

"""Result models for the bulk directory operations.

ImportResult mirrors the upload report operators see after pushing a
workbook; ExportResult carries what the chunked export actually fetched.
"""


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a bulk employee import."""
    source: str  # workbook file name
    processed: int  # data rows looked at
    added: int  # rows inserted
    skipped: int  # rows whose empid already existed
    errors: int  # rows rejected (missing fields / insert failure)
    error_details: list[str] = field(default_factory=list)
    error_log_path: Path | None = None

    @property
    def status(self) -> str:
        if self.added > 0:
            return "success"
        if self.errors > 0:
            return "failed"
        return "unchanged"


@dataclass(frozen=True)
class ExportResult:
    """Outcome of a chunked export to a workbook."""
    path: Path
    expected_rows: int  # count(*) taken before paging
    exported_rows: int  # rows actually fetched and written
    pages: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    @property
    def complete(self) -> bool:
        return self.exported_rows >= self.expected_rows
