# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from empstats.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
table: employees
stats:
  join_key_header: Player
  winner_rank_depth: 3
export:
  page_size: 2
  output_directory: ./exports
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "empstats.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
