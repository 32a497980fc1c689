from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pandas as pd
from openpyxl.utils import get_column_letter

from empstats.models.employee import EMPLOYEE_COLUMNS, IMPORT_COLUMNS, EmployeeRecord

"""Workbook writers: directory export and the bulk-upload template."""

__all__ = [
    "EXPORT_SHEET",
    "TEMPLATE_SHEET",
    "TEMPLATE_ROWS",
    "write_employees_workbook",
    "write_import_template",
]

EXPORT_SHEET = "Employees"
TEMPLATE_SHEET = "Employee Template"

TEMPLATE_ROWS: list[dict[str, str]] = [
    {
        "empid": "12345",
        "empname": "John Doe",
        "department": "Information Technology",
        "site": "Head Office",
        "classification": "HO",
        "division": "Digital Technology",
        "directorate": "Technology & Innovation",
        "grouping": "IT Support",
    },
    {
        "empid": "67890",
        "empname": "Jane Smith",
        "department": "Human Resources",
        "site": "Branch Office",
        "classification": "Branch",
        "division": "People & Culture",
        "directorate": "Corporate Services",
        "grouping": "HR Operations",
    },
]

# Character widths per template column
TEMPLATE_WIDTHS = {
    "empid": 15,
    "empname": 25,
    "department": 25,
    "site": 20,
    "classification": 15,
    "division": 25,
    "directorate": 30,
    "grouping": 20,
}


def write_employees_workbook(records: Sequence[EmployeeRecord], path: Path) -> Path:
    """Write records to a single-sheet workbook, one column per stored field."""
    df = pd.DataFrame([r.to_dict() for r in records], columns=list(EMPLOYEE_COLUMNS))
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=EXPORT_SHEET, index=False)
    return path


def write_import_template(path: Path) -> Path:
    """Write the bulk-upload template with two example employees."""
    df = pd.DataFrame(TEMPLATE_ROWS, columns=list(IMPORT_COLUMNS))
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=TEMPLATE_SHEET, index=False)
        ws = writer.sheets[TEMPLATE_SHEET]
        for idx, col in enumerate(IMPORT_COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = TEMPLATE_WIDTHS[col]
    return path
