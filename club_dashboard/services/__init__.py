# club_dashboard/services/__init__.py
"""
Services package exports.
"""
from .fixtures_service import FixturesService, countdown_label, progress_percent
from .rankings_service import RankingsService

__all__ = ["FixturesService", "RankingsService", "countdown_label", "progress_percent"]
