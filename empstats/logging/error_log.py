from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from empstats.models.error_record import ErrorRecord

"""Row error log for bulk employee imports.

An import collects its rejected rows and hands them over in one go once the
insert has finished; they land in `logs/errors-YYYYMMDD-HHMMSS.log` as JSON
Lines, ordered by sheet row. Nothing is created for a clean import.
"""

__all__ = [
    "ErrorRecord",
    "ImportErrorLog",
]

LOGS_DIR = Path("./logs")


class ImportErrorLog:
    """JSON Lines sink for the row errors of one import run.

    The file name is stamped (UTC) when the log is created, so every write of
    the same run appends to the same file.
    """

    def __init__(self, logs_dir: Path | None = None, started: datetime | None = None) -> None:
        self.logs_dir = logs_dir or LOGS_DIR
        self.started = started or datetime.now(UTC)

    @property
    def path(self) -> Path:
        return self.logs_dir / f"errors-{self.started:%Y%m%d-%H%M%S}.log"

    def write(self, records: Iterable[ErrorRecord]) -> Path | None:
        """Append `records` sorted by row; None (and no file) when there are none."""
        ordered = sorted(records, key=lambda r: r.row)
        if not ordered:
            return None
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.writelines(r.to_json_line() + "\n" for r in ordered)
        return self.path
