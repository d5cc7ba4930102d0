import copy
from datetime import datetime

from club_dashboard.config import AppConfig
from club_dashboard.handlers.dashboard_handler import DashboardHandler


def make_handler(**overrides):
    cfg = AppConfig(apps_script_url="https://example.test/exec", tz="UTC", **overrides)
    return DashboardHandler.from_config(cfg)


def test_build_full_view(payload, now):
    vm = make_handler().build(payload, now=now)

    assert vm.now == now
    assert [fv.fixture.opponent for fv in vm.fixtures] == ["Lisburn Lynx", "Newry Nomads", "Belfast Bulls"]
    assert vm.primary.fixture.opponent == "Newry Nomads"
    assert vm.primary_countdown == "0d 2h 0m"
    assert [s.team for s in vm.league_table] == ["NDSC Bears", "Belfast Bulls", "New Entrant"]
    assert [h.avg for h in vm.top_hitters] == [0.310, 0.250, None]
    assert vm.recent_results[0].opponent == "Lisburn Lynx"
    assert vm.home_run_leaders[0].player == "B. Jones"


def test_build_is_deterministic_and_pure(payload, now):
    handler = make_handler()
    original = copy.deepcopy(payload)

    first = handler.build(payload, now=now)
    second = handler.build(payload, now=now)

    assert first == second
    assert payload == original


def test_display_limits(payload, now):
    vm = make_handler(limit_hitters=1, limit_results=2, limit_hr_leaders=0).build(payload, now=now)
    assert len(vm.top_hitters) == 1
    assert len(vm.recent_results) == 2
    assert len(vm.home_run_leaders) == 3


def test_missing_and_malformed_sections_give_empty_view(now):
    handler = make_handler()
    for payload in ({}, {"nextFixture": None, "leagueTable": "oops", "topHitters": {}}, None, []):
        vm = handler.build(payload, now=now)
        assert vm.fixtures == []
        assert vm.primary is None
        assert vm.primary_countdown is None
        assert vm.league_table == []
        assert vm.top_hitters == []
        assert vm.recent_results == []
        assert vm.home_run_leaders == []


def test_naive_now_is_taken_in_app_timezone(payload):
    vm = make_handler().build(payload, now=datetime(2025, 6, 7, 12, 0))
    assert vm.now.tzinfo is not None
    assert vm.primary.fixture.opponent == "Newry Nomads"
