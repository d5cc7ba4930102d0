# club_dashboard/services/fixtures_service.py
"""
Fixture windowing, countdown and progress logic.

Responsibilities:
  - parse fixture rows
  - order by start time (unparseable dates last)
  - drop fixtures older than the grace window
  - pick the primary fixture (first one strictly in the future)
  - build countdown labels and progress percentages
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, List, Optional, Sequence

from dateutil import tz

from ..models import Fixture, FixtureView

PLAYED_LABEL = "Played"
PROGRESS_FLOOR = 5


def countdown_label(when: Optional[datetime], now: datetime, grace: timedelta = timedelta(hours=24)) -> Optional[str]:
    """
    Always "Xd Xh Xm" (no seconds) for future dates.

    Returns "Played" when the date is at most `grace` in the past, None when it is
    older than that or unknown.
    """
    if when is None:
        return None

    diff = when - now
    if diff <= timedelta(0):
        return PLAYED_LABEL if -diff <= grace else None

    total_minutes = int(diff.total_seconds() // 60)
    days, rem = divmod(total_minutes, 24 * 60)
    hours, mins = divmod(rem, 60)
    return f"{days}d {hours}h {mins}m"


def progress_percent(when: Optional[datetime], now: datetime, window: timedelta = timedelta(days=7)) -> int:
    """
    Map remaining time inside a lookahead window to 0-100.

    Grows as the match approaches; PROGRESS_FLOOR when further away than the window
    (or unknown), 100 once the start time has passed.
    """
    if when is None:
        return PROGRESS_FLOOR

    remaining = (when - now).total_seconds()
    if remaining <= 0:
        return 100

    span = window.total_seconds()
    if span <= 0 or remaining >= span:
        return PROGRESS_FLOOR

    pct = int(100 * (1 - remaining / span))
    return max(PROGRESS_FLOOR, min(100, pct))


def _sort_key(f: Fixture):
    # Unknown dates go last; sorted() keeps input order among equals.
    if f.when is None:
        return (1, 0.0)
    return (0, f.when.timestamp())


@dataclass
class FixturesService:
    """Builds the windowed fixture list for display."""

    tz_name: str
    grace_hours: int = 24
    progress_window_days: int = 7

    @property
    def app_tz(self):
        """Return the configured timezone used for naive dates and display."""
        return tz.gettz(self.tz_name) or tz.UTC

    @property
    def grace(self) -> timedelta:
        return timedelta(hours=self.grace_hours)

    def parse(self, rows: Sequence[Any]) -> List[Fixture]:
        """Turn raw rows into Fixture models, skipping anything that is not an object."""
        return [Fixture.from_row(r, self.app_tz) for r in rows if isinstance(r, dict)]

    def sort(self, fixtures: Sequence[Fixture]) -> List[Fixture]:
        return sorted(fixtures, key=_sort_key)

    def window(self, fixtures: Sequence[Fixture], now: datetime) -> List[Fixture]:
        """
        Keep fixtures that are upcoming or played within the grace window.

        Unparseable dates cannot be placed in time and are dropped.
        """
        cutoff = now - self.grace
        return [f for f in self.sort(fixtures) if f.when is not None and f.when >= cutoff]

    def format_when(self, when: Optional[datetime], fallback: str = "") -> str:
        """Format like 'Sat 07 Jun, 18:30' in the app timezone."""
        if when is None:
            return fallback
        return when.astimezone(self.app_tz).strftime("%a %d %b, %H:%M")

    def to_view(self, f: Fixture, now: datetime) -> FixtureView:
        is_played = f.when is not None and f.when <= now
        return FixtureView(
            fixture=f,
            when_str=self.format_when(f.when, fallback=str(f.raw.get("date") or "")),
            countdown=countdown_label(f.when, now, self.grace),
            is_played=is_played,
            progress=progress_percent(f.when, now, timedelta(days=self.progress_window_days)),
        )

    def upcoming(self, rows: Sequence[Any], now: datetime) -> List[FixtureView]:
        """Parse, sort, window and decorate fixture rows."""
        return [self.to_view(f, now) for f in self.window(self.parse(rows), now)]

    @staticmethod
    def primary(views: Sequence[FixtureView], now: datetime) -> Optional[FixtureView]:
        """First fixture strictly in the future; played ones are never primary."""
        for v in views:
            if v.fixture.when is not None and v.fixture.when > now:
                return v
        return None
