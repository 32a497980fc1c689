from __future__ import annotations

from pathlib import Path

import pytest

from empstats.config.loader import ConfigError, build_config, load_config
from empstats.models.config_models import DEFAULT_REQUIRED_COLUMNS


def test_load_sample_config(write_config: Path):
    cfg = load_config(write_config)

    assert cfg.database.host == "localhost"
    assert cfg.database.port == 5432
    assert cfg.table == "employees"
    assert cfg.stats.join_key_header == "Player"
    assert cfg.stats.winner_rank_depth == 3
    assert cfg.export.page_size == 2
    assert cfg.export.output_directory == "./exports"
    # defaults for omitted keys
    assert cfg.stats.display_name_header == "Player Name"
    assert cfg.stats.lenient is True
    assert cfg.importing.required_columns == DEFAULT_REQUIRED_COLUMNS


def test_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "bad.yml"
    p.write_text("database: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


def test_root_must_be_mapping(temp_workdir: Path):
    p = temp_workdir / "config" / "list.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_config(p)


def test_empty_file_fails_validation(temp_workdir: Path):
    p = temp_workdir / "config" / "empty.yml"
    p.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)


def test_build_config_minimal():
    cfg = build_config({"database": {"dsn": "postgresql://localhost/appdb"}})

    assert cfg.database.dsn == "postgresql://localhost/appdb"
    assert cfg.database.host is None
    assert cfg.table == "employees"
    assert cfg.export.page_size == 1000


def test_build_config_import_columns():
    cfg = build_config({"database": {}, "import": {"required_columns": ["empid", "empname"]}})

    assert cfg.importing.required_columns == ("empid", "empname")
