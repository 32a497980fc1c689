from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the employee directory tool.

These are the typed views of config/empstats.yml. The loader in
empstats/config/loader.py validates the raw YAML and builds them; everything
downstream only ever sees these frozen objects.
"""

DEFAULT_REQUIRED_COLUMNS = ("empid", "empname", "department", "site", "classification")


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class StatsSettings:
    """Knobs for the statistic processor.

    The defaults reproduce the behaviour operators are used to: the `Player`
    column carries the UID, `HO`/`Branch` are the two recognised
    classifications and the top three rows compete for winner.
    """
    join_key_header: str = "Player"
    display_name_header: str = "Player Name"
    head_office_classification: str = "HO"
    branch_classification: str = "Branch"
    branch_marker: str = "CABANG"
    winner_rank_depth: int = 3
    lenient: bool = True  # strict mode raises on ragged rows instead of padding


@dataclass(frozen=True)
class ExportSettings:
    page_size: int = 1000
    output_directory: str = "."


@dataclass(frozen=True)
class ImportSettings:
    required_columns: tuple[str, ...] = DEFAULT_REQUIRED_COLUMNS


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    database: DatabaseConfig
    table: str = "employees"
    stats: StatsSettings = field(default_factory=StatsSettings)
    export: ExportSettings = field(default_factory=ExportSettings)
    importing: ImportSettings = field(default_factory=ImportSettings)
