# app.py
"""
Flask entrypoint for the club dashboard service.

Routes:
  HTML:
    - /                      matchday dashboard (re-polls every REFRESH_INTERVAL_SECONDS)

  JSON:
    - /api/dashboard         raw upstream snapshot (proxy) + freshness headers
    - /api/dashboard/view    derived view model (sorted, windowed, countdowns)

  Misc:
    - /health

Error envelope (JSON routes):
  - missing APPS_SCRIPT_URL   -> 500 {"error": "..."}
  - upstream non-2xx          -> 502 {"error": "Apps Script returned N", "details": "<=200 chars"}
  - network / bad JSON        -> 500 {"error": "..."}
  - anything else             -> 500 {"error": "..."}
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import HTTPException, InternalServerError

from club_dashboard.cache import TTLCache
from club_dashboard.config import AppConfig
from club_dashboard.errors import DashboardError
from club_dashboard.gateway import NO_STORE_HEADERS, DashboardGateway
from club_dashboard.handlers.dashboard_handler import DashboardHandler
from club_dashboard.sheet_client import SheetClient

log = logging.getLogger("club_dashboard")


def create_app(cfg: Optional[AppConfig] = None) -> Flask:
    """
    App factory.

    Builds shared dependencies (client + cache + gateway + handler) once per process.
    Nothing here talks to the network; a missing upstream URL is reported per request.
    """
    cfg = cfg or AppConfig()
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    client = SheetClient(cfg.apps_script_url, timeout=cfg.upstream_timeout_seconds)
    gateway = DashboardGateway(
        client=client,
        cache=TTLCache(),
        freshness_policy=cfg.freshness_policy,
        cache_ttl_seconds=cfg.cache_ttl_seconds,
    )
    handler = DashboardHandler.from_config(cfg)

    app = Flask(__name__)
    app.config["DASHBOARD"] = cfg

    if not cfg.apps_script_url:
        log.warning("APPS_SCRIPT_URL is not set; dashboard requests will fail until it is configured")

    # -------------------------
    # Error envelope
    # -------------------------

    @app.errorhandler(DashboardError)
    def handle_dashboard_error(err: DashboardError):
        """Convert gateway failures into the uniform JSON envelope."""
        resp = jsonify(err.to_dict())
        resp.status_code = err.status_code
        resp.headers.update(NO_STORE_HEADERS)
        return resp

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        """Any other failure: JSON 500 on the API routes, the stock 500 page elsewhere."""
        if isinstance(err, HTTPException):
            return err
        log.exception("unhandled error on %s", request.path)
        if not request.path.startswith("/api/"):
            return InternalServerError(original_exception=err)
        resp = jsonify({"error": str(err) or type(err).__name__})
        resp.status_code = 500
        resp.headers.update(NO_STORE_HEADERS)
        return resp

    # -------------------------
    # Serializers
    # -------------------------

    def fixture_view_to_dict(fv) -> Dict[str, Any]:
        """Serialize a FixtureView into JSON-safe primitives."""
        f = fv.fixture
        return {
            "team": f.team,
            "opponent": f.opponent,
            "date": f.when.isoformat() if f.when else None,
            "when_str": fv.when_str,
            "venue": f.venue,
            "league": f.league,
            "notes": f.notes,
            "lat": f.lat,
            "lng": f.lng,
            "countdown": fv.countdown,
            "is_played": fv.is_played,
            "progress": fv.progress,
        }

    def standing_to_dict(s) -> Dict[str, Any]:
        return {
            "position": s.position,
            "team": s.team,
            "played": s.played,
            "wins": s.wins,
            "losses": s.losses,
            "points": s.points,
        }

    def hitter_to_dict(h) -> Dict[str, Any]:
        return {
            "player": h.player,
            "team": h.team,
            "avg": h.avg,
            "obp": h.obp,
            "rbis": h.rbis,
            "games": h.games,
        }

    def result_to_dict(m) -> Dict[str, Any]:
        return {
            "team": m.team,
            "opponent": m.opponent,
            "date": m.when.isoformat() if m.when else None,
            "club_score": m.club_score,
            "opponent_score": m.opponent_score,
            "score": m.score_line,
            "result": m.outcome,
        }

    def hr_leader_to_dict(h) -> Dict[str, Any]:
        return {"player": h.player, "team": h.team, "home_runs": h.home_runs or 0}

    # -------------------------
    # JSON routes
    # -------------------------

    @app.get("/api/dashboard")
    def api_dashboard():
        """Proxy the upstream snapshot unmodified, with freshness headers."""
        data = gateway.fetch()
        resp = jsonify(data)
        resp.headers.update(gateway.response_headers())
        return resp

    @app.get("/api/dashboard/view")
    def api_dashboard_view():
        """Derived view model for the same snapshot."""
        vm = handler.build(gateway.fetch())
        resp = jsonify(
            {
                "generatedAt": vm.now.isoformat(),
                "primaryFixture": fixture_view_to_dict(vm.primary) if vm.primary else None,
                "primaryCountdown": vm.primary_countdown,
                "nextFixture": [fixture_view_to_dict(fv) for fv in vm.fixtures],
                "leagueTable": [standing_to_dict(s) for s in vm.league_table],
                "topHitters": [hitter_to_dict(h) for h in vm.top_hitters],
                "recentResults": [result_to_dict(m) for m in vm.recent_results],
                "homeRunLeaders": [hr_leader_to_dict(h) for h in vm.home_run_leaders],
            }
        )
        resp.headers.update(gateway.response_headers())
        return resp

    # -------------------------
    # HTML route
    # -------------------------

    @app.get("/")
    def dashboard_page():
        """Server-rendered dashboard; failures show an error banner and the page keeps re-polling."""
        vm = None
        error = None
        status = 200
        try:
            vm = handler.build(gateway.fetch())
        except DashboardError as err:
            error = err.message
            status = err.status_code

        html = render_template(
            "dashboard.html",
            club_name=cfg.club_name,
            refresh_seconds=cfg.refresh_interval_seconds,
            vm=vm,
            error=error,
        )
        return html, status, dict(NO_STORE_HEADERS)

    # -------------------------
    # Health
    # -------------------------

    @app.get("/health")
    def health():
        """Simple health endpoint for Docker/monitoring checks."""
        return {"ok": True, "upstreamConfigured": bool(cfg.apps_script_url)}

    return app


# WSGI entrypoint for gunicorn (Docker CMD uses: app:app)
app = create_app()

if __name__ == "__main__":
    # Dev server (not for production).
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8000")), debug=True)
