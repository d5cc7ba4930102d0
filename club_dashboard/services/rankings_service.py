# club_dashboard/services/rankings_service.py
"""
Ordering rules for the league table and the stat/results cards.

Every ordering is a stable sort, so rows with equal keys keep their input order.
Missing or non-numeric keys are replaced by a sentinel rather than dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence

from dateutil import tz

from ..models import Hitter, HomeRunLeader, Result, Standing


def _objects(rows: Sequence[Any]) -> List[dict]:
    return [r for r in rows if isinstance(r, dict)]


@dataclass
class RankingsService:
    """Service responsible for the four ranked lists."""

    tz_name: str = "UTC"

    @property
    def app_tz(self):
        return tz.gettz(self.tz_name) or tz.UTC

    def league_table(self, rows: Sequence[Any]) -> List[Standing]:
        """Position ascending; rows without a numeric position go last."""
        standings = [Standing.from_row(r) for r in _objects(rows)]

        def sort_key(s: Standing):
            if s.position is None:
                return (1, 0.0)
            return (0, s.position)

        return sorted(standings, key=sort_key)

    def top_hitters(self, rows: Sequence[Any]) -> List[Hitter]:
        """Batting average descending; missing averages rank below any real value."""
        hitters = [Hitter.from_row(r) for r in _objects(rows)]
        # reverse=True keeps the sort stable for equal keys
        return sorted(
            hitters,
            key=lambda h: (h.avg is not None, h.avg if h.avg is not None else 0.0),
            reverse=True,
        )

    def recent_results(self, rows: Sequence[Any]) -> List[Result]:
        """Most recent first; unparseable dates count as the epoch (oldest)."""
        results = [Result.from_row(r, self.app_tz) for r in _objects(rows)]

        def sort_key(m: Result) -> float:
            if m.when is None:
                return 0.0
            return m.when.timestamp()

        return sorted(results, key=sort_key, reverse=True)

    def home_run_leaders(self, rows: Sequence[Any]) -> List[HomeRunLeader]:
        """Home runs descending; a missing count is treated as zero."""
        leaders = [HomeRunLeader.from_row(r) for r in _objects(rows)]
        return sorted(leaders, key=lambda h: h.home_runs or 0.0, reverse=True)
