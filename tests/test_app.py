from datetime import datetime, timedelta, timezone

import pytest
import requests

from app import create_app
from club_dashboard.config import AppConfig
from club_dashboard.handlers.dashboard_handler import DashboardHandler

from conftest import DummyResponse, iso

URL = "https://script.example.test/macros/s/abc/exec"


def make_client(**overrides):
    settings = {"apps_script_url": URL, "tz": "UTC"}
    settings.update(overrides)
    app = create_app(AppConfig(**settings))
    app.testing = True
    return app.test_client()


def test_dashboard_proxies_payload_with_no_store_headers(calls, payload):
    calls.response = DummyResponse(payload)
    resp = make_client().get("/api/dashboard")

    assert resp.status_code == 200
    assert resp.get_json() == payload
    assert "no-store" in resp.headers["Cache-Control"]
    assert resp.headers["Pragma"] == "no-cache"
    assert resp.headers["Expires"] == "0"
    assert "t" in calls[0]["params"]


def test_missing_config_is_500_without_network(calls):
    resp = make_client(apps_script_url=None).get("/api/dashboard")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Missing APPS_SCRIPT_URL env var"}
    assert len(calls) == 0


def test_upstream_503_is_502_envelope(calls):
    calls.response = DummyResponse(status_code=503, text="Service Unavailable")
    resp = make_client().get("/api/dashboard")

    assert resp.status_code == 502
    body = resp.get_json()
    assert "503" in body["error"]
    assert body["details"] == "Service Unavailable"
    assert "no-store" in resp.headers["Cache-Control"]


def test_network_failure_is_500(calls):
    calls.error = requests.Timeout("upstream timed out")
    resp = make_client().get("/api/dashboard")

    assert resp.status_code == 500
    assert resp.get_json()["error"]


def test_ttl_policy_caches_and_sets_shared_cache_headers(calls, payload):
    calls.response = DummyResponse(payload)
    client = make_client(freshness_policy="ttl", cache_ttl_seconds=30)

    first = client.get("/api/dashboard")
    second = client.get("/api/dashboard")

    assert first.status_code == second.status_code == 200
    assert len(calls) == 1
    assert calls[0]["params"] is None
    assert "s-maxage=30" in first.headers["Cache-Control"]
    assert "stale-while-revalidate" in first.headers["Cache-Control"]


def test_ttl_policy_does_not_cache_failures(calls, payload):
    calls.response = DummyResponse(status_code=500, text="boom")
    client = make_client(freshness_policy="ttl", cache_ttl_seconds=30)
    assert client.get("/api/dashboard").status_code == 502

    calls.response = DummyResponse(payload)
    assert client.get("/api/dashboard").status_code == 200
    assert len(calls) == 2


def test_view_endpoint_shapes_payload(calls, payload):
    real_now = datetime.now(timezone.utc)
    payload["nextFixture"] = [
        {"Team": "NDSC", "Opponent": "Later", "date": iso(real_now + timedelta(days=2))},
        {"Team": "NDSC", "Opponent": "Gone", "date": iso(real_now - timedelta(days=3))},
        {"Team": "NDSC", "Opponent": "Sooner", "date": iso(real_now + timedelta(hours=5))},
    ]
    calls.response = DummyResponse(payload)
    resp = make_client().get("/api/dashboard/view")

    assert resp.status_code == 200
    body = resp.get_json()
    assert set(body) >= {"nextFixture", "leagueTable", "topHitters", "recentResults", "homeRunLeaders"}
    assert [h["avg"] for h in body["topHitters"]] == [0.31, 0.25, None]
    assert body["leagueTable"][-1]["team"] == "New Entrant"
    assert body["homeRunLeaders"][-1]["home_runs"] == 0
    assert [f["opponent"] for f in body["nextFixture"]] == ["Sooner", "Later"]
    assert body["primaryFixture"]["opponent"] == "Sooner"
    assert body["primaryCountdown"].startswith("0d 4h") or body["primaryCountdown"].startswith("0d 5h")


def test_view_endpoint_uses_error_envelope(calls):
    resp = make_client(apps_script_url="").get("/api/dashboard/view")
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Missing APPS_SCRIPT_URL env var"


def test_html_page_renders(calls, payload):
    calls.response = DummyResponse(payload)
    resp = make_client(club_name="North Down Softball Club").get("/")

    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert "North Down Softball Club" in html
    assert "League Table" in html
    assert "B. Jones" in html


def test_html_page_shows_error_banner(calls):
    calls.response = DummyResponse(status_code=503, text="down")
    resp = make_client().get("/")

    assert resp.status_code == 502
    html = resp.get_data(as_text=True)
    assert "Apps Script returned 503" in html
    assert 'http-equiv="refresh"' in html


@pytest.mark.parametrize("url, expected", [(URL, True), (None, False)])
def test_health(calls, url, expected):
    resp = make_client(apps_script_url=url).get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"ok": True, "upstreamConfigured": expected}
    assert len(calls) == 0


def test_upstream_304_is_502_envelope(calls):
    calls.response = DummyResponse(status_code=304, text="")
    resp = make_client().get("/api/dashboard")

    assert resp.status_code == 502
    assert resp.get_json() == {"error": "Apps Script returned 304", "details": ""}


def test_unexpected_failure_in_json_route_is_500_envelope(calls, payload, monkeypatch):
    def broken_build(self, payload, now=None):
        raise RuntimeError("view build exploded")

    monkeypatch.setattr(DashboardHandler, "build", broken_build)
    calls.response = DummyResponse(payload)
    resp = make_client().get("/api/dashboard/view")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "view build exploded"}
    assert "no-store" in resp.headers["Cache-Control"]


def test_unknown_route_stays_404(calls):
    resp = make_client().get("/api/nope")
    assert resp.status_code == 404
