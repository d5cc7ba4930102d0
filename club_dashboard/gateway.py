# club_dashboard/gateway.py
"""
Upstream gateway: fetch the raw snapshot and decide its freshness headers.

Two deployment policies:
  - no-store: cache-bust every fetch and tell every downstream cache not to store.
  - ttl: keep the payload in-process for a short window and allow shared caches
    to hold it for the same window.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .cache import TTLCache
from .config import FRESHNESS_TTL
from .sheet_client import SheetClient

NO_STORE_HEADERS: Dict[str, str] = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def ttl_headers(ttl_seconds: int) -> Dict[str, str]:
    """Short shared-cache window with revalidation."""
    return {
        "Cache-Control": f"public, max-age=0, s-maxage={ttl_seconds}, stale-while-revalidate={ttl_seconds}",
    }


@dataclass
class DashboardGateway:
    """Fetches the dashboard payload according to the configured freshness policy."""

    client: SheetClient
    cache: TTLCache
    freshness_policy: str
    cache_ttl_seconds: int

    @property
    def uses_ttl(self) -> bool:
        return self.freshness_policy == FRESHNESS_TTL and self.cache_ttl_seconds > 0

    def fetch(self) -> Dict[str, Any]:
        """Return the raw payload. Errors from the client propagate unchanged."""
        if not self.uses_ttl:
            return self.client.fetch_dashboard(cache_bust=True)

        return self.cache.get_or_set(
            key="dashboard:snapshot",
            ttl_seconds=self.cache_ttl_seconds,
            loader=lambda: self.client.fetch_dashboard(cache_bust=False),
        )

    def response_headers(self) -> Dict[str, str]:
        """Headers for a successful response."""
        if self.uses_ttl:
            return ttl_headers(self.cache_ttl_seconds)
        return dict(NO_STORE_HEADERS)
