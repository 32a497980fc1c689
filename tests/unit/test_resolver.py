from __future__ import annotations

import pytest

from empstats.db.employee_store import LookupFailedError
from empstats.models.stats_result import NO_WINNER_NAME, NOT_FOUND
from empstats.services.resolver import (
    extract_join_keys,
    index_by_uid,
    pick_winner,
    resolve_records,
)
from empstats.text.reader import parse_tabular_text
from tests.helpers import FakeStore, make_employee


def _rows(text: str):
    return parse_tabular_text(text).rows


class TestExtractJoinKeys:
    def test_distinct_in_first_seen_order(self):
        rows = _rows("Player\nU2\nU1\nU2\nU3")
        assert extract_join_keys(rows, "Player") == ["U2", "U1", "U3"]

    def test_not_available_keys_are_skipped(self):
        rows = _rows("Rank\tPlayer\n1\tU1\n2\n3\tU3")
        assert extract_join_keys(rows, "Player") == ["U1", "U3"]

    def test_missing_header_gives_no_keys(self):
        rows = _rows("Rank\tName\n1\tA")
        assert extract_join_keys(rows, "Player") == []


def test_index_by_uid_keeps_first_duplicate():
    first = make_employee("U1", empid="1")
    second = make_employee("U1", empid="2")
    anonymous = make_employee(None)

    table = index_by_uid([first, second, anonymous])

    assert table == {"U1": first}


class TestPickWinner:
    def test_rank_one_match(self):
        table = {"A": make_employee("A"), "B": make_employee("B")}
        winner = pick_winner(["A", "B"], table)
        assert winner.record.uid == "A"
        assert winner.rank == 1

    def test_falls_back_to_rank_two(self):
        table = {"B": make_employee("B")}
        winner = pick_winner(["X", "B", "C"], table)
        assert winner.record.uid == "B"
        assert winner.rank == 2

    def test_falls_back_to_rank_three(self):
        table = {"C": make_employee("C")}
        winner = pick_winner(["X", "Y", "C"], table)
        assert winner.rank == 3

    def test_placeholder_carries_display_name(self):
        winner = pick_winner(["X", "Y", "Z"], {}, placeholder_name="Xavier")
        assert not winner.found
        assert winner.record.empname == "Xavier"
        assert winner.record.uid == NOT_FOUND
        assert winner.record.empid == NOT_FOUND

    def test_placeholder_default_name(self):
        winner = pick_winner([], {})
        assert winner.record.empname == NO_WINNER_NAME

    def test_not_available_candidate_is_skipped(self):
        table = {"N/A": make_employee("N/A"), "B": make_employee("B")}
        winner = pick_winner(["N/A", "B"], table)
        assert winner.record.uid == "B"
        assert winner.rank == 2


class TestResolveRecords:
    def test_single_bulk_lookup(self):
        store = FakeStore([make_employee("U1"), make_employee("U2")])
        resolution = resolve_records(_rows("Player\tPlayer Name\nU1\tA\nU2\tB\nU1\tA"), store)

        assert store.calls == [["U1", "U2"]]
        assert [r.uid for r in resolution.records] == ["U1", "U2"]
        assert resolution.join_keys == ["U1", "U2"]
        assert resolution.winner.record.uid == "U1"

    def test_winner_outside_rank_depth_is_not_used(self):
        store = FakeStore([make_employee("U4")])
        text = "Player\tPlayer Name\nX1\tFirst\nX2\tb\nX3\tc\nU4\td"
        resolution = resolve_records(_rows(text), store, rank_depth=3)

        assert not resolution.winner.found
        assert resolution.winner.record.empname == "First"
        # U4 still counts toward the resolved set
        assert [r.uid for r in resolution.records] == ["U4"]

    def test_rank_depth_is_configurable(self):
        store = FakeStore([make_employee("U4")])
        text = "Player\nX1\nX2\nX3\nU4"
        resolution = resolve_records(_rows(text), store, rank_depth=4)

        assert resolution.winner.rank == 4

    def test_placeholder_name_not_available_uses_default(self):
        resolution = resolve_records(_rows("Player\tPlayer Name\nX1"), FakeStore())

        assert resolution.winner.record.empname == NO_WINNER_NAME

    def test_lookup_failure_propagates(self):
        store = FakeStore(error=LookupFailedError("connection reset"))
        with pytest.raises(LookupFailedError):
            resolve_records(_rows("Player\nU1"), store)
