# club_dashboard/watch.py
"""
Console dashboard that polls a running gateway.

Usage:
  club-dashboard-watch --url http://localhost:8000/api/dashboard --interval 60
  club-dashboard-watch --once
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Callable, Dict, List, Optional

import requests

from .config import AppConfig
from .errors import DashboardError
from .handlers.dashboard_handler import DashboardHandler
from .refresher import DashboardRefresher, Snapshot

log = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:8000/api/dashboard"


def make_fetch(url: str, timeout: int = 10) -> Callable[[], Dict[str, Any]]:
    """Build a fetch function for the gateway endpoint that raises DashboardError on failure."""

    def fetch() -> Dict[str, Any]:
        try:
            r = requests.get(url, timeout=timeout, headers={"Cache-Control": "no-store"})
        except requests.RequestException as e:
            raise DashboardError(str(e) or type(e).__name__) from e

        if not 200 <= r.status_code < 300:
            text = r.text[:120] if r.text else ""
            raise DashboardError(f"API error: {r.status_code}" + (f" - {text}" if text else ""))

        try:
            return r.json()
        except ValueError as e:
            raise DashboardError(f"Invalid JSON from gateway: {e}") from e

    return fetch


def render_text(snap: Snapshot, club_name: str = "") -> str:
    """Render a snapshot as plain text lines."""
    lines: List[str] = []
    if club_name:
        lines.append(club_name)

    if snap.last_updated is not None:
        lines.append(f"Updated {snap.last_updated.strftime('%H:%M')}")
    if snap.loading and snap.view is None:
        lines.append("Loading...")
    if snap.error:
        lines.append(f"! {snap.error}")

    vm = snap.view
    if vm is None:
        return "\n".join(lines)

    lines.append("")
    lines.append("Next Fixture")
    if not vm.fixtures:
        lines.append("  No upcoming fixtures")
    for fv in vm.fixtures:
        f = fv.fixture
        status = "Played" if fv.is_played else f"{fv.countdown or '—'} away"
        where = " · ".join(x for x in (fv.when_str, f.venue, f.league) if x)
        lines.append(f"  {f.team} vs {f.opponent}  [{status}]  {where}")

    lines.append("")
    lines.append("League Table")
    for s in vm.league_table:
        pos = _num(s.position)
        lines.append(f"  {pos:>3} {s.team}  P {_num(s.played)} · W {_num(s.wins)} · L {_num(s.losses)} ({_num(s.points)} pts)")

    lines.append("")
    lines.append("Top Hitters")
    for i, h in enumerate(vm.top_hitters, start=1):
        lines.append(f"  #{i} {h.player} ({h.team})  AVG {_avg(h.avg)}  OBP {_avg(h.obp)}  RBIs {_num(h.rbis)}")

    lines.append("")
    lines.append("Recent Results")
    for m in vm.recent_results:
        lines.append(f"  {m.outcome or '-'} {m.team} vs {m.opponent}  {m.score_line}")

    lines.append("")
    lines.append("Home Run Leaders")
    for h in vm.home_run_leaders:
        lines.append(f"  {_num(h.home_runs or 0)} {h.player} ({h.team})")

    return "\n".join(lines)


def _num(v: Optional[float]) -> str:
    if v is None:
        return "—"
    return str(int(v)) if float(v).is_integer() else str(v)


def _avg(v: Optional[float]) -> str:
    return f"{v:.3f}" if v is not None else "—"


def main(argv: Optional[List[str]] = None) -> int:
    cfg = AppConfig()
    parser = argparse.ArgumentParser(description="Poll the club dashboard gateway and print it.")
    parser.add_argument("--url", default=DEFAULT_URL, help="gateway endpoint")
    parser.add_argument("--interval", type=float, default=cfg.refresh_interval_seconds, help="seconds between polls")
    parser.add_argument("--once", action="store_true", help="fetch once, print and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=cfg.log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    refresher = DashboardRefresher(
        fetch=make_fetch(args.url, timeout=cfg.upstream_timeout_seconds),
        handler=DashboardHandler.from_config(cfg),
        interval_seconds=args.interval,
    )

    if args.once:
        snap = refresher.refresh_now()
        print(render_text(snap, cfg.club_name))
        return 1 if snap.error else 0

    refresher.state.subscribe(lambda snap: print(render_text(snap, cfg.club_name) + "\n", flush=True))
    refresher.start()
    try:
        while not refresher.wait(3600):
            pass
    except KeyboardInterrupt:
        log.info("stopping")
    finally:
        refresher.stop(timeout=5)
    return 0


if __name__ == "__main__":
    sys.exit(main())
