from __future__ import annotations

import logging
import threading

from empstats.models.config_models import StatsSettings
from empstats.models.stats_result import StatsResult, Winner
from empstats.text.reader import parse_tabular_text

from .aggregation import build_distributions
from .normalizer import CategoryNormalizer
from .resolver import RecordLookup, resolve_records

"""Statistic processor orchestration.

process_stats() runs parse -> resolve -> normalize -> aggregate and returns a
brand new StatsResult. It keeps no state; the store lookup is its only I/O.

StatsSession is the holder an interactive caller keeps between runs. It only
replaces its current result once a run has fully succeeded, and refuses to
start a run while another one is still in flight.
"""

__all__ = [
    "StatsBusyError",
    "StatsSession",
    "process_stats",
]

logger = logging.getLogger(__name__)


class StatsBusyError(Exception):
    """A run is already in progress on this session."""


def process_stats(
    text: str | None,
    lookup: RecordLookup,
    settings: StatsSettings | None = None,
) -> StatsResult:
    """Parse pasted leaderboard text and compute participation statistics.

    Raises:
        EmptyInputError: no text; nothing is queried
        MalformedRowError: ragged row in strict mode
        LookupFailedError: the record store failed; no result is produced
    """
    settings = settings or StatsSettings()

    parsed = parse_tabular_text(text, lenient=settings.lenient)
    resolution = resolve_records(
        parsed.rows,
        lookup,
        join_key_header=settings.join_key_header,
        display_name_header=settings.display_name_header,
        rank_depth=settings.winner_rank_depth,
    )

    normalizer = CategoryNormalizer(settings.branch_marker)
    normalized = [normalizer.normalize_record(r) for r in resolution.records]
    distributions = build_distributions(
        normalized,
        head_office=settings.head_office_classification,
        branch=settings.branch_classification,
    )

    winner = resolution.winner
    if winner.found:
        winner = Winner(record=normalizer.normalize_record(winner.record), rank=winner.rank)

    result = StatsResult(
        winner=winner,
        distributions=distributions,
        total_parsed_rows=len(parsed.rows),
        total_resolved_rows=len(normalized),
        raw_rows=parsed.rows,
        resolved_records=resolution.records,
        malformed_rows=len(parsed.malformed_rows),
    )
    logger.debug(
        "stats parsed=%d resolved=%d winner_rank=%s",
        result.total_parsed_rows,
        result.total_resolved_rows,
        winner.rank,
    )
    return result


class StatsSession:
    """Caller-owned holder of the last successful StatsResult."""

    def __init__(self, lookup: RecordLookup, settings: StatsSettings | None = None) -> None:
        self.lookup = lookup
        self.settings = settings or StatsSettings()
        self._current: StatsResult | None = None
        self._lock = threading.Lock()

    @property
    def current(self) -> StatsResult | None:
        return self._current

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def run(self, text: str | None) -> StatsResult:
        """Process `text` and publish the result.

        On any failure the exception propagates and the previously published
        result stays in place.
        """
        if not self._lock.acquire(blocking=False):
            raise StatsBusyError("a statistics run is already in progress")
        try:
            result = process_stats(text, self.lookup, self.settings)
            self._current = result
            return result
        finally:
            self._lock.release()

    def clear(self) -> None:
        self._current = None
