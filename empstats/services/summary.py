from __future__ import annotations

from ..models.processing_result import ExportResult, ImportResult
from ..models.stats_result import DIMENSIONS, StatsResult

"""Summary line and report rendering.

Summary lines are single `key=value` lines logged at SUMMARY level (the
logger adds the `SUMMARY ` prefix). The stats report is the multi-line text
block operators read after processing a leaderboard.
"""

_WINNER_LABELS = (
    ("empid", "Employee ID"),
    ("empname", "Employee Name"),
    ("department", "Department"),
    ("site", "Site"),
    ("directorate", "Directorate"),
    ("uid", "UID"),
)


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for tiny durations
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_stats_summary_line(result: StatsResult) -> str:
    """e.g. `stats parsed=2 resolved=2 malformed=0 winner=U100 winner_rank=1`."""
    winner = result.winner
    rank = winner.rank if winner.rank is not None else "none"
    return (
        f"stats parsed={result.total_parsed_rows} "
        f"resolved={result.total_resolved_rows} "
        f"malformed={result.malformed_rows} "
        f"winner={winner.record.uid} "
        f"winner_rank={rank}"
    )


def render_stats_report(result: StatsResult) -> str:
    """Human-readable winner block and per-dimension distributions."""
    lines = ["Winner:"]
    winner = result.winner.to_dict()
    for key, label in _WINNER_LABELS:
        lines.append(f"  {label}: {winner[key]}")

    if not result.distributions:
        lines.append("")
        lines.append("No matching employees found; distributions are empty.")
        return "\n".join(lines)

    for dimension in DIMENSIONS:
        lines.append("")
        lines.append(f"{dimension.capitalize()} Distribution:")
        for entry in result.distribution(dimension):
            lines.append(f"  {entry.label}: {entry.count} ({entry.percentage})")
    return "\n".join(lines)


def render_import_summary_line(result: ImportResult) -> str:
    return (
        f"import source={result.source} "
        f"processed={result.processed} "
        f"added={result.added} "
        f"skipped={result.skipped} "
        f"errors={result.errors}"
    )


def render_export_summary_line(result: ExportResult) -> str:
    return (
        f"export rows={result.exported_rows}/{result.expected_rows} "
        f"pages={result.pages} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)} "
        f"path={result.path}"
    )
