# club_dashboard/config.py
"""
Configuration for the club dashboard.

This module centralizes all tunable settings (upstream URL, freshness policy,
fixture windowing, refresh cadence, display limits and timezone).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Optional

FRESHNESS_NO_STORE = "no-store"
FRESHNESS_TTL = "ttl"


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_str(name: str, default: str) -> str:
    """Read a string environment variable, treating blank values as missing."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_url(name: str) -> Optional[str]:
    """Read an optional URL; blank means not configured."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable app configuration.

    Values are read from the environment when the config object is created, so an
    app factory (or a test) can build a fresh config after changing env vars.

    Notes:
      - apps_script_url has no default. A missing URL is reported on each request,
        the process still starts.
      - freshness_policy: "no-store" (cache-bust every fetch) or "ttl" (short shared cache).
    """

    # Upstream
    apps_script_url: Optional[str] = field(default_factory=lambda: _env_url("APPS_SCRIPT_URL"))
    upstream_timeout_seconds: int = field(default_factory=lambda: _env_int("UPSTREAM_TIMEOUT_SECONDS", 10))

    # Freshness
    freshness_policy: str = field(default_factory=lambda: _env_str("FRESHNESS_POLICY", FRESHNESS_NO_STORE))
    cache_ttl_seconds: int = field(default_factory=lambda: _env_int("CACHE_TTL_SECONDS", 30))

    # Fixture windowing
    fixture_grace_hours: int = field(default_factory=lambda: _env_int("FIXTURE_GRACE_HOURS", 24))
    progress_window_days: int = field(default_factory=lambda: _env_int("PROGRESS_WINDOW_DAYS", 7))

    # Refresh cadence (poll + countdown tick)
    refresh_interval_seconds: int = field(default_factory=lambda: _env_int("REFRESH_INTERVAL_SECONDS", 60))

    # Display limits (0 = show all)
    limit_hitters: int = field(default_factory=lambda: _env_int("LIMIT_HITTERS", 4))
    limit_results: int = field(default_factory=lambda: _env_int("LIMIT_RESULTS", 4))
    limit_hr_leaders: int = field(default_factory=lambda: _env_int("LIMIT_HR_LEADERS", 5))

    # Presentation
    tz: str = field(default_factory=lambda: _env_str("TZ", "Europe/London"))
    club_name: str = field(default_factory=lambda: _env_str("CLUB_NAME", "North Down Softball Club"))
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO"))

    def __post_init__(self):
        """Normalize the freshness policy; unknown values fall back to no-store."""
        # dataclass frozen => use object.__setattr__
        policy = (self.freshness_policy or "").strip().lower()
        if policy not in (FRESHNESS_NO_STORE, FRESHNESS_TTL):
            policy = FRESHNESS_NO_STORE
        object.__setattr__(self, "freshness_policy", policy)

        if self.cache_ttl_seconds < 0:
            object.__setattr__(self, "cache_ttl_seconds", 0)
        if self.fixture_grace_hours < 0:
            object.__setattr__(self, "fixture_grace_hours", 0)
        if self.progress_window_days <= 0:
            object.__setattr__(self, "progress_window_days", 7)
        if self.refresh_interval_seconds <= 0:
            object.__setattr__(self, "refresh_interval_seconds", 60)
        object.__setattr__(self, "log_level", (self.log_level or "INFO").upper())
