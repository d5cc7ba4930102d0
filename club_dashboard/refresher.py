# club_dashboard/refresher.py
"""
Polling refresh loop for a dashboard client.

Two independent timers run on the same interval:
  - poll: fetch a fresh snapshot and rebuild the view
  - tick: rebuild the view from the held snapshot so countdowns move between pulls

Neither timer touches shared data directly; both go through DashboardState, which
applies each update under a lock. Whichever update lands last wins.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .errors import DashboardError
from .handlers.dashboard_handler import DashboardHandler
from .models import DashboardViewModel

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """An immutable copy of the client state at one moment."""
    payload: Optional[Dict[str, Any]] = None
    view: Optional[DashboardViewModel] = None
    error: Optional[str] = None
    loading: bool = True
    last_updated: Optional[datetime] = None
    tick: int = 0


class DashboardState:
    """Owned client state. Updates are whole-value swaps under a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snap = Snapshot()
        self._listeners: List[Callable[[Snapshot], None]] = []

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snap

    def subscribe(self, listener: Callable[[Snapshot], None]) -> None:
        """Register a callback invoked with every new snapshot (e.g. a renderer)."""
        self._listeners.append(listener)

    def _swap(self, **changes: Any) -> Snapshot:
        with self._lock:
            self._snap = replace(self._snap, **changes)
            snap = self._snap
        self._notify(snap)
        return snap

    def _notify(self, snap: Snapshot) -> None:
        for listener in list(self._listeners):
            listener(snap)

    def loaded(self, payload: Dict[str, Any], view: DashboardViewModel, at: datetime) -> Snapshot:
        """A fetch succeeded: store it and clear any error banner."""
        return self._swap(payload=payload, view=view, error=None, loading=False, last_updated=at)

    def failed(self, message: str) -> Snapshot:
        """A fetch failed: keep the previous data and show the message."""
        return self._swap(error=message)

    def ticked(self, view: Optional[DashboardViewModel], payload: Optional[Dict[str, Any]]) -> Snapshot:
        """
        Time moved on: bump the tick counter and swap in the recomputed view.

        The view is only applied if it was built from the payload still held; a poll
        that landed in between already stored a newer view.
        """
        with self._lock:
            changes: Dict[str, Any] = {"tick": self._snap.tick + 1}
            if view is not None and self._snap.payload is payload:
                changes["view"] = view
            self._snap = replace(self._snap, **changes)
            snap = self._snap
        self._notify(snap)
        return snap


class DashboardRefresher:
    """
    Runs the poll and tick timers against a fetch function.

    Args:
        fetch: returns the raw payload or raises DashboardError.
        handler: builds the view model.
        interval_seconds: period for both timers.
        state: optional externally owned state container.
    """

    def __init__(
        self,
        fetch: Callable[[], Dict[str, Any]],
        handler: DashboardHandler,
        interval_seconds: float = 60,
        state: Optional[DashboardState] = None,
    ) -> None:
        self.fetch = fetch
        self.handler = handler
        self.interval_seconds = interval_seconds
        self.state = state or DashboardState()
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    def refresh_now(self) -> Snapshot:
        """Pull a fresh snapshot and rebuild. Errors become the state's error message."""
        try:
            payload = self.fetch()
        except DashboardError as e:
            log.warning("refresh failed: %s", e.message)
            return self.state.failed(e.message)
        except Exception as e:
            log.exception("refresh failed unexpectedly")
            return self.state.failed(str(e) or "Unknown error")

        now = self.handler.now()
        view = self.handler.build(payload, now=now)
        return self.state.loaded(payload, view, now)

    def tick_now(self) -> Snapshot:
        """Recompute time-derived fields from the held payload, no network."""
        payload = self.state.snapshot().payload
        view = self.handler.build(payload) if payload is not None else None
        return self.state.ticked(view, payload)

    def _loop(self, action: Callable[[], Snapshot]) -> None:
        while not self._stop.wait(self.interval_seconds):
            action()

    def start(self) -> None:
        """Do an initial load, then start both timers as daemon threads."""
        self._stop.clear()
        self.refresh_now()
        for name, action in (("poll", self.refresh_now), ("tick", self.tick_now)):
            t = threading.Thread(target=self._loop, args=(action,), name=f"dashboard-{name}", daemon=True)
            t.start()
            self._threads.append(t)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stop() is called or the timeout passes. Returns True once stopped."""
        return self._stop.wait(timeout)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal both timers to stop and wait for them."""
        self._stop.set()
        for t in self._threads:
            t.join(timeout)
        self._threads.clear()
