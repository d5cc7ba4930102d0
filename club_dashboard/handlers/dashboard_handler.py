# club_dashboard/handlers/dashboard_handler.py
"""
Handler responsible for building the full dashboard view model from a raw payload.

Keeps Flask routes and the refresh loop simple by concentrating assembly logic here.
The build is pure: no I/O, the payload is never mutated, and it never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from ..config import AppConfig
from ..models import DashboardViewModel
from ..services.fixtures_service import FixturesService
from ..services.rankings_service import RankingsService

T = TypeVar("T")


def payload_rows(payload: Any, key: str) -> List[Any]:
    """Return payload[key] when it is a list, else an empty list."""
    if not isinstance(payload, dict):
        return []
    rows = payload.get(key)
    return rows if isinstance(rows, list) else []


def _limit(items: Sequence[T], n: int) -> List[T]:
    """Apply a display limit; n <= 0 means no limit."""
    return list(items[:n]) if n > 0 else list(items)


@dataclass
class DashboardHandler:
    """Orchestrates fixture + rankings services into a single view model."""

    fixtures_service: FixturesService
    rankings_service: RankingsService
    limit_hitters: int = 4
    limit_results: int = 4
    limit_hr_leaders: int = 5

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "DashboardHandler":
        """Wire services and display limits from an AppConfig."""
        return cls(
            fixtures_service=FixturesService(
                tz_name=cfg.tz,
                grace_hours=cfg.fixture_grace_hours,
                progress_window_days=cfg.progress_window_days,
            ),
            rankings_service=RankingsService(tz_name=cfg.tz),
            limit_hitters=cfg.limit_hitters,
            limit_results=cfg.limit_results,
            limit_hr_leaders=cfg.limit_hr_leaders,
        )

    def now(self) -> datetime:
        """Return the current time in the app timezone."""
        return datetime.now(tz=self.fixtures_service.app_tz)

    def build(self, payload: Dict[str, Any], now: Optional[datetime] = None) -> DashboardViewModel:
        """
        Build a view model for one snapshot.

        Args:
            payload: raw upstream JSON (nextFixture, leagueTable, topHitters,
                recentResults, homeRunLeaders).
            now: reference time; defaults to the current time. Naive values are
                taken to be in the app timezone.

        Returns:
            DashboardViewModel ready for JSON or template rendering.
        """
        if now is None:
            now = self.now()
        elif now.tzinfo is None:
            now = now.replace(tzinfo=self.fixtures_service.app_tz)

        fixtures = self.fixtures_service.upcoming(payload_rows(payload, "nextFixture"), now)
        rankings = self.rankings_service

        return DashboardViewModel(
            now=now,
            fixtures=fixtures,
            primary=self.fixtures_service.primary(fixtures, now),
            league_table=rankings.league_table(payload_rows(payload, "leagueTable")),
            top_hitters=_limit(rankings.top_hitters(payload_rows(payload, "topHitters")), self.limit_hitters),
            recent_results=_limit(rankings.recent_results(payload_rows(payload, "recentResults")), self.limit_results),
            home_run_leaders=_limit(
                rankings.home_run_leaders(payload_rows(payload, "homeRunLeaders")), self.limit_hr_leaders
            ),
        )
