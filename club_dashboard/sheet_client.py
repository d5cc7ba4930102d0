# club_dashboard/sheet_client.py
"""
Thin HTTP client for the spreadsheet-backed data source (Apps Script web app).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests

from .errors import ConfigurationError, TransportError, UpstreamError

log = logging.getLogger(__name__)

MISSING_URL_MESSAGE = "Missing APPS_SCRIPT_URL env var"


class SheetClient:
    """A minimal client that reads the full dashboard snapshot from the upstream URL."""

    def __init__(self, base_url: Optional[str], timeout: int = 10) -> None:
        """Store the upstream URL (may be None) and build request headers."""
        self.base_url = (base_url or "").strip() or None
        self.timeout = timeout
        self._headers = {"User-Agent": "club-dashboard/1.0", "Accept": "application/json"}

    def fetch_dashboard(self, cache_bust: bool = True) -> Dict[str, Any]:
        """
        Execute one GET against the upstream and return the parsed JSON untouched.

        Args:
            cache_bust: add a per-request ``t=<epoch ms>`` nonce so no intermediate
                cache (browser, CDN, Google) can answer with a stale copy.

        Raises:
            ConfigurationError: no upstream URL configured (no request is made).
            UpstreamError: upstream answered with a non-2xx status.
            TransportError: network failure or a body that is not JSON.
        """
        if not self.base_url:
            raise ConfigurationError(MISSING_URL_MESSAGE)

        params = {"t": str(int(time.time() * 1000))} if cache_bust else None

        try:
            r = requests.get(self.base_url, params=params, timeout=self.timeout, headers=self._headers)
        except requests.RequestException as e:
            log.warning("upstream request failed: %s: %s", type(e).__name__, e)
            raise TransportError(str(e) or type(e).__name__) from e

        if not 200 <= r.status_code < 300:
            err = UpstreamError(r.status_code, r.text)
            log.warning("upstream returned %s: %s", r.status_code, err.details)
            raise err

        try:
            return r.json()
        except ValueError as e:
            log.warning("upstream body is not valid JSON: %s", e)
            raise TransportError(f"Invalid JSON from upstream: {e}") from e
