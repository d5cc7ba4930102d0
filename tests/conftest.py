from datetime import datetime, timedelta, timezone
import json

import pytest
import requests


NOW = datetime(2025, 6, 7, 12, 0, tzinfo=timezone.utc)


def iso(dt):
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class DummyResponse:
    def __init__(self, data=None, status_code=200, text=None):
        self._data = data
        self.status_code = status_code
        if text is None:
            text = json.dumps(data) if data is not None else ""
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._data is None:
            return json.loads(self.text)
        return self._data


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def payload():
    return {
        "nextFixture": [
            {"Team": "NDSC Bears", "Opponent": "Belfast Bulls", "date": iso(NOW + timedelta(days=3)),
             "Venue": "Ward Park", "League": "NI League"},
            {"Team": "NDSC Bears", "Opponent": "Lisburn Lynx", "date": iso(NOW - timedelta(hours=23)),
             "Venue": "Ward Park", "League": "NI League"},
            {"Team": "NDSC Cubs", "Opponent": "Derry Dodgers", "date": iso(NOW - timedelta(hours=25)),
             "Venue": "Away", "League": "Cup"},
            {"Team": "NDSC Cubs", "Opponent": "Newry Nomads", "date": iso(NOW + timedelta(hours=2)),
             "Venue": "Ward Park", "League": "Cup", "Notes": "Bring helmets"},
            {"Team": "NDSC Cubs", "Opponent": "TBC", "date": "TBC", "Venue": "", "League": "Cup"},
        ],
        "leagueTable": [
            {"position": 2, "team": "Belfast Bulls", "played": 5, "wins": 3, "losses": 2, "points": 6},
            {"position": "n/a", "team": "New Entrant", "played": 0, "wins": 0, "losses": 0, "points": 0},
            {"position": "1", "team": "NDSC Bears", "played": 5, "wins": 5, "losses": 0, "points": 10},
        ],
        "topHitters": [
            {"player": "A. Smith", "team": "Bears", "avg": 0.250, "obp": 0.300, "rbis": 4, "Games Played": 5},
            {"player": "B. Jones", "team": "Bears", "avg": 0.310, "obp": 0.400, "rbis": 7, "Games Played": 5},
            {"player": "C. Brown", "team": "Cubs", "avg": None, "obp": None, "rbis": None, "Games Played": 1},
        ],
        "recentResults": [
            {"Team": "NDSC Bears", "Opponent": "Belfast Bulls", "Date": "2025-05-20",
             "NDSC Score": 7, "Opponent Score": 4, "Result": "w"},
            {"Team": "NDSC Cubs", "Opponent": "Derry Dodgers", "Date": "not a date",
             "NDSC Score": 2, "Opponent Score": 9, "Result": "L"},
            {"Team": "NDSC Bears", "Opponent": "Lisburn Lynx", "Date": "2025-06-01",
             "NDSC Score": 5, "Opponent Score": 5, "Result": "D"},
        ],
        "homeRunLeaders": [
            {"Player": "A. Smith", "Team": "Bears", "Home_Runs": 2},
            {"Player": "D. White", "Team": "Cubs"},
            {"Player": "B. Jones", "Team": "Bears", "Home_Runs": "5"},
        ],
    }


@pytest.fixture
def calls(monkeypatch):
    """Record outbound requests.get calls; tests set calls.response before use."""

    class Recorder(list):
        response = DummyResponse({})
        error = None

    rec = Recorder()

    def fake_get(url, params=None, timeout=None, headers=None):
        rec.append({"url": url, "params": params, "timeout": timeout, "headers": headers})
        if rec.error is not None:
            raise rec.error
        return rec.response

    monkeypatch.setattr(requests, "get", fake_get)
    return rec
