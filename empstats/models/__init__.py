"""Domain models for the employee directory tool.

Configuration views, employee records, pasted-text rows and the result
objects produced by the statistic processor and the bulk operations.
"""

from .config_models import AppConfig, DatabaseConfig, ExportSettings, ImportSettings, StatsSettings
from .employee import EMPLOYEE_COLUMNS, IMPORT_COLUMNS, EmployeeRecord
from .processing_result import ExportResult, ImportResult
from .row_data import NOT_AVAILABLE, RawRow
from .stats_result import NOT_FOUND, DistributionEntry, StatsResult, Winner

__all__ = [
    # Configuration models
    "AppConfig",
    "DatabaseConfig",
    "ExportSettings",
    "ImportSettings",
    "StatsSettings",
    # Records
    "EMPLOYEE_COLUMNS",
    "IMPORT_COLUMNS",
    "EmployeeRecord",
    "NOT_AVAILABLE",
    "RawRow",
    # Results
    "NOT_FOUND",
    "DistributionEntry",
    "StatsResult",
    "Winner",
    "ExportResult",
    "ImportResult",
]
