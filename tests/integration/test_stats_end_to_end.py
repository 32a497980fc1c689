from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

from empstats.cli import main as cli_main
from tests.helpers import FakeCursor, employee_row, make_employee


def _connection(cursor):
    @contextmanager
    def fake(cfg):
        yield cursor
    return fake


def _directory():
    return [
        make_employee("U100", empid="100", empname="Alice", site="JAKARTA - HQ",
                      classification="HO", division="TECH - CORE", directorate="DIGITAL"),
        make_employee("U200", empid="200", empname="Bob", site="CABANG SURABAYA",
                      classification="Branch", department="SALES CABANG SBY", directorate="COMMERCIAL"),
        make_employee("U300", empid="300", empname="Citra", site="BANDUNG",
                      classification="SITE", directorate="COMMERCIAL"),
    ]


LEADERBOARD = (
    "Rank\tPlayer\tPlayer Name\tScore\n"
    "1\tGHOST\tGhost Player\t990\n"
    "2\tU200\tBob\t870\n"
    "3\tU100\tAlice\t860\n"
    "4\tU300\tCitra\t500\n"
    "5\tU100\tAlice\t100\n"
)


def test_stats_report_from_file(temp_workdir: Path, write_config, capsys):
    board = temp_workdir / "data" / "board.txt"
    board.write_text(LEADERBOARD, encoding="utf-8")
    cursor = FakeCursor(results=[[employee_row(r) for r in _directory()]])

    with patch("empstats.cli.app._db_connection", _connection(cursor)):
        code = cli_main(["stats", str(board)])

    out = capsys.readouterr().out
    assert code == 0
    # one bulk lookup with distinct keys in first-seen order
    assert len(cursor.executed) == 1
    assert cursor.executed[0][1] == (("GHOST", "U200", "U100", "U300"),)
    # rank one unknown, rank two wins
    assert "  UID: U200" in out
    assert "  Site: Others" in out
    assert "  Department: SALES" in out
    assert "Department Distribution:" in out
    assert "  TECH: 1 (33.33%)" in out
    assert "  SALES: 1 (33.33%)" in out
    assert "  Others: 1 (33.33%)" in out
    assert "  COMMERCIAL: 2 (66.67%)" in out
    assert "SUMMARY stats parsed=5 resolved=3 malformed=0 winner=U200 winner_rank=2" in out


def test_stats_json_from_stdin(temp_workdir: Path, write_config, capsys, monkeypatch):
    import io

    monkeypatch.setattr("sys.stdin", io.StringIO("Player\tPlayer Name\nNOPE\tNobody\n"))
    cursor = FakeCursor(results=[[]])

    with patch("empstats.cli.app._db_connection", _connection(cursor)):
        code = cli_main(["stats", "--json"])

    out = capsys.readouterr().out
    assert code == 0
    payload = json.loads(out[out.index("{"): out.index("SUMMARY")])
    assert payload["winner"]["empname"] == "Nobody"
    assert payload["winner"]["uid"] == "N/A"
    assert payload["siteDistribution"] == []
    assert payload["totalParsedRows"] == 1


def test_custom_join_header_from_config(temp_workdir: Path, write_config, capsys):
    write_config.write_text(
        write_config.read_text(encoding="utf-8").replace("join_key_header: Player", "join_key_header: UID"),
        encoding="utf-8",
    )
    board = temp_workdir / "data" / "board.txt"
    board.write_text("UID\tPlayer Name\nU100\tAlice\n", encoding="utf-8")
    cursor = FakeCursor(results=[[employee_row(_directory()[0])]])

    with patch("empstats.cli.app._db_connection", _connection(cursor)):
        code = cli_main(["stats", str(board)])

    assert code == 0
    assert "winner=U100 winner_rank=1" in capsys.readouterr().out
