from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    AppConfig,
    DatabaseConfig,
    ExportSettings,
    ImportSettings,
    StatsSettings,
)

"""Config loader.

Responsibilities:
- Load YAML config (default config/empstats.yml)
- Validate against the packaged config_schema.json
- Apply defaults for every optional section
"""

DEFAULT_CONFIG_PATH = Path("config/empstats.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (missing keys, wrong types, extra keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def build_config(data: dict[str, Any]) -> AppConfig:
    """Turn validated config data into AppConfig, filling defaults."""
    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    stats = StatsSettings(**(data.get("stats") or {}))
    export = ExportSettings(**(data.get("export") or {}))
    import_raw = data.get("import") or {}
    importing = ImportSettings()
    if "required_columns" in import_raw:
        importing = ImportSettings(required_columns=tuple(import_raw["required_columns"]))
    return AppConfig(
        database=db,
        table=data.get("table", "employees"),
        stats=stats,
        export=export,
        importing=importing,
    )


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    return build_config(data)
