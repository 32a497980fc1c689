from __future__ import annotations

from empstats.services.duplicates import find_duplicate_uids
from tests.helpers import make_employee


def test_groups_case_insensitively():
    a = make_employee("abc", empid="1")
    b = make_employee("ABC", empid="2")
    c = make_employee("xyz", empid="3")

    groups = find_duplicate_uids([a, c, b])

    assert groups == [[a, b]]


def test_records_without_uid_are_ignored():
    records = [make_employee(None, empid="1"), make_employee("", empid="2"), make_employee(None, empid="3")]

    assert find_duplicate_uids(records) == []


def test_groups_in_first_seen_order():
    records = [
        make_employee("b", empid="1"),
        make_employee("a", empid="2"),
        make_employee("a", empid="3"),
        make_employee("B", empid="4"),
    ]

    groups = find_duplicate_uids(records)

    assert [[r.empid for r in g] for g in groups] == [["1", "4"], ["2", "3"]]


def test_no_duplicates():
    assert find_duplicate_uids([make_employee("a"), make_employee("b")]) == []
