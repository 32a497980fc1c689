from __future__ import annotations

import re

from empstats.models.employee import EmployeeRecord

"""Category normalizer.

Organisational fields are typed by hand and arrive as e.g.
"DIGITAL TECHNOLOGY - JAKARTA" or "CABANG SURABAYA". Statistics group them
by the part before the first hyphen or branch-office marker.
"""

__all__ = [
    "OTHERS",
    "CATEGORY_FIELDS",
    "CategoryNormalizer",
    "normalize_category",
]

OTHERS = "Others"

CATEGORY_FIELDS: tuple[str, ...] = ("site", "department", "division", "directorate", "grouping")


class CategoryNormalizer:
    def __init__(self, branch_marker: str = "CABANG") -> None:
        self.branch_marker = branch_marker
        # earliest of "<marker>..." or "-..." to end of line
        self._cut = re.compile(f"{re.escape(branch_marker)}.*|-.*")

    def normalize(self, value: str | None) -> str:
        if value is None:
            return OTHERS
        text = str(value)
        if not text:
            return OTHERS
        bucket = self._cut.sub("", text, count=1).strip()
        return bucket or OTHERS

    def normalize_record(self, record: EmployeeRecord) -> EmployeeRecord:
        """Return a copy with every category field bucketed."""
        return record.with_categories(
            **{name: self.normalize(getattr(record, name)) for name in CATEGORY_FIELDS}
        )


_default = CategoryNormalizer()


def normalize_category(value: str | None) -> str:
    """normalize() with the default CABANG marker."""
    return _default.normalize(value)
