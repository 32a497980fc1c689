from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from empstats.models.employee import EmployeeRecord
from empstats.models.stats_result import DIMENSIONS, DistributionEntry

from .normalizer import OTHERS

"""Aggregation engine.

Counts normalized labels per dimension over the full resolved set and turns
them into percentage strings. Entry order is the order labels were first
seen, not count or label order.
"""

__all__ = [
    "format_percentage",
    "department_bucket",
    "count_labels",
    "build_distributions",
]


def format_percentage(count: int, total: int) -> str:
    """count/total as a percentage with two decimals, halves rounded up.

    The float quotient is rounded exactly as stored, so 1/32 gives "3.13%".
    """
    value = Decimal(count / total * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value}%"


def department_bucket(
    record: EmployeeRecord,
    head_office: str = "HO",
    branch: str = "Branch",
) -> str:
    """Division for head-office staff, department for branch staff, else Others."""
    if record.classification == head_office:
        return record.division or OTHERS
    if record.classification == branch:
        return record.department or OTHERS
    return OTHERS


def count_labels(
    records: Sequence[EmployeeRecord], key: Callable[[EmployeeRecord], str]
) -> dict[str, int]:
    counts: dict[str, int] = {}
    for record in records:
        label = key(record)
        counts[label] = counts.get(label, 0) + 1
    return counts


def build_distributions(
    records: Sequence[EmployeeRecord],
    head_office: str = "HO",
    branch: str = "Branch",
) -> dict[str, list[DistributionEntry]]:
    """Per-dimension distributions over already-normalized records.

    An empty record set yields an empty mapping.
    """
    total = len(records)
    if total == 0:
        return {}

    keys: dict[str, Callable[[EmployeeRecord], str]] = {
        "department": lambda r: department_bucket(r, head_office, branch),
        "site": lambda r: r.site or OTHERS,
        "directorate": lambda r: r.directorate or OTHERS,
        "grouping": lambda r: r.grouping or OTHERS,
    }
    distributions: dict[str, list[DistributionEntry]] = {}
    for dimension in DIMENSIONS:
        counts = count_labels(records, keys[dimension])
        distributions[dimension] = [
            DistributionEntry(label=label, count=count, percentage=format_percentage(count, total))
            for label, count in counts.items()
        ]
    return distributions
