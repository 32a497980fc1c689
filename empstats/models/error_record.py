from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Row-level failures of a bulk employee import are written as JSON Lines, one
ErrorRecord per line with a fixed key set. row=-1 is used for file-level
errors where the specific row cannot be determined.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: Workbook filename being imported
        row: Data row number (1-based). Use -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Database error message or description
    """
    timestamp: str  # ISO8601 UTC
    source: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(source: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        # dataclass -> dict keeps the key set closed
        return json.dumps(asdict(self), ensure_ascii=False)

    def describe(self) -> str:
        """Short human form used in import reports, e.g. 'Row 3: Missing empname'."""
        if self.row < 0:
            return self.message
        return f"Row {self.row}: {self.message}"
