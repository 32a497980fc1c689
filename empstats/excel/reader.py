from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

"""Employee workbook reader.

The upload workbook keeps its data on the first sheet: row 1 is the header
(the template's column names), every later row is one employee. All cells
are read as text so empids keep their exact spelling (no 12345.0).
"""

__all__ = [
    "ImportFileError",
    "EmptySheetError",
    "MissingColumnsError",
    "SheetData",
    "read_employee_sheet",
    "normalize_sheet",
]


class ImportFileError(Exception):
    """The workbook cannot be used for an import."""


class EmptySheetError(ImportFileError):
    """Raised when the first sheet has no data rows."""


class MissingColumnsError(ImportFileError):
    """Raised when required columns are missing in the sheet header."""


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[dict[str, Any]]  # column -> stripped text or None


def read_employee_sheet(path: Path) -> tuple[str, pd.DataFrame]:
    """Read the first sheet of `path` as strings, returning (sheet name, frame)."""
    try:
        xls = pd.ExcelFile(path)
    except (OSError, ValueError) as e:
        raise ImportFileError(f"cannot open workbook {path.name}: {e}") from e
    if not xls.sheet_names:
        raise EmptySheetError(f"workbook {path.name} has no sheets")
    name = str(xls.sheet_names[0])
    # keep_default_na=False: names like "NA" stay text, blanks become ""
    df = xls.parse(name, dtype=str, keep_default_na=False)
    return name, df


def normalize_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    required_columns: Iterable[str] | None = None,
) -> SheetData:
    """Turn a raw frame into SheetData.

    Steps:
    1. Trim header names
    2. Drop rows where every cell is blank
    3. Trim cells; blank cells become None
    4. Validate required columns are present
    """
    columns = [str(c).strip() for c in df.columns.tolist()]
    if required_columns is not None:
        missing = [c for c in required_columns if c not in columns]
        if missing:
            raise MissingColumnsError(
                f"sheet '{sheet_name}' missing required columns: {', '.join(missing)}"
            )

    rows: list[dict[str, Any]] = []
    for raw in df.itertuples(index=False, name=None):
        row: dict[str, Any] = {}
        for col, val in zip(columns, raw, strict=False):
            if val is None or (not isinstance(val, str) and pd.isna(val)):
                row[col] = None
                continue
            text = str(val).strip()
            row[col] = text or None
        if all(v is None for v in row.values()):
            continue
        rows.append(row)

    if not rows:
        raise EmptySheetError(f"sheet '{sheet_name}' has no data rows")
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)
