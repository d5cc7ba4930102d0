# club_dashboard/errors.py
"""
Gateway error taxonomy.

Every failure talking to the upstream sheet is raised as a DashboardError subclass.
The Flask app converts these into a uniform JSON envelope: {"error": ..., "details"?: ...}.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

DETAILS_MAX_CHARS = 200


class DashboardError(Exception):
    """Base class for request-level dashboard failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON error envelope for this failure."""
        return {"error": self.message}


class ConfigurationError(DashboardError):
    """The upstream location is not configured. Needs operator intervention."""

    status_code = 500


class UpstreamError(DashboardError):
    """The upstream answered with a non-success status."""

    status_code = 502

    def __init__(self, upstream_status: int, details: Optional[str] = None) -> None:
        super().__init__(f"Apps Script returned {upstream_status}")
        self.upstream_status = upstream_status
        self.details = (details or "")[:DETAILS_MAX_CHARS]

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["details"] = self.details
        return out


class TransportError(DashboardError):
    """Network or parse failure while talking to the upstream."""

    status_code = 500
