from __future__ import annotations

from collections.abc import Iterable

from ..models.employee import EmployeeRecord


def find_duplicate_uids(records: Iterable[EmployeeRecord]) -> list[list[EmployeeRecord]]:
    """Group records sharing a UID (case-insensitive); only groups of two or more.

    Records without a UID are ignored. Groups come out in first-seen order.
    """
    groups: dict[str, list[EmployeeRecord]] = {}
    for record in records:
        if not record.uid:
            continue
        groups.setdefault(record.uid.lower(), []).append(record)
    return [group for group in groups.values() if len(group) > 1]
