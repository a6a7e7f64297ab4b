import json

import pytest

import backend.storage
from backend.models import AggregatedStats, LeaderEntry, SeriesDocument, SeriesScore, TeamStats
from backend.storage import StorageError, StorageManager


def test_flat_team_stats_load_as_first_innings():
    stats = TeamStats.model_validate({"Joe Root": {"runs": 12, "wickets": 0}})
    assert list(stats.innings) == [1]
    assert stats.innings[1]["Joe Root"].runs == 12


def test_per_innings_team_stats():
    stats = TeamStats.model_validate({
        "innings1": {"Joe Root": {"runs": 12}},
        "innings2": {"Joe Root": {"runs": 3, "wickets": 1}},
    })
    assert [(i, name, s.runs, s.wickets) for i, name, s in stats.entries()] == [
        (1, "Joe Root", 12, 0),
        (2, "Joe Root", 3, 1),
    ]


def test_team_stats_add_accumulates():
    stats = TeamStats()
    stats.add(1, "Mitchell Starc", wickets=3)
    stats.add(1, "Mitchell Starc", runs=11)
    stats.add(2, "Mitchell Starc", wickets=2)
    assert stats.model_dump() == {
        "innings1": {"Mitchell Starc": {"runs": 11, "wickets": 3}},
        "innings2": {"Mitchell Starc": {"runs": 0, "wickets": 2}},
    }


def test_series_score_properties():
    score = SeriesScore(england=1, australia=3, draw=0)
    assert score.completed == 4
    assert not score.is_complete(5)
    assert score.winner == "Australia"
    assert score.score_line == "3-1"
    assert SeriesScore(england=2, australia=2, draw=1).winner == "Draw"


def test_series_document_upsert_refreshes_timestamp():
    doc = SeriesDocument(last_updated="2025-11-20T00:00:00.000Z")
    record = {"matchId": "1", "date": "2025-11-21"}
    doc.upsert(SeriesDocument.model_validate({"matches": {"1": record}}).matches["1"])
    assert list(doc.matches) == ["1"]
    assert doc.last_updated != "2025-11-20T00:00:00.000Z"
    assert doc.last_updated.endswith("Z")


def test_leader_entries_accept_runs_and_wickets_keys():
    stats = AggregatedStats.model_validate({
        "actualTiebreaker": 172,
        "topRunScorers": {"eng": [{"name": "Joe Root", "runs": 150}]},
        "topWicketTakers": {"aus": [{"name": "Mitchell Starc", "wickets": 9}]},
    })
    assert stats.leader("runs", "eng") == LeaderEntry(name="Joe Root", value=150)
    assert stats.leader("wickets", "aus").value == 9
    assert stats.leader("wickets", "eng") is None
    assert stats.to_json_dict()["topRunScorers"]["eng"] == [{"name": "Joe Root", "value": 150}]


def test_storage_round_trip(tmp_path):
    path = tmp_path / "data" / "doc.json"
    storage = StorageManager(str(path))
    storage.save_data({"lastUpdated": "x", "matches": {}})
    assert storage.load_data() == {"lastUpdated": "x", "matches": {}}
    assert not (tmp_path / "data" / "doc.json.tmp").exists()


def test_storage_missing_or_malformed(tmp_path):
    with pytest.raises(StorageError):
        StorageManager(str(tmp_path / "missing.json")).load_data()

    bad = tmp_path / "bad.json"
    bad.write_text("{nope")
    with pytest.raises(StorageError):
        StorageManager(str(bad)).load_data()


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise backend.storage.requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return json.loads(self.payload)


def test_storage_remote(monkeypatch):
    monkeypatch.setattr(backend.storage.requests, "get",
                        lambda url, headers=None, timeout=None: FakeResponse(200, '{"ok": true}'))
    storage = StorageManager("https://example.com/series-data.json")
    assert storage.use_remote
    assert storage.load_data() == {"ok": True}

    with pytest.raises(StorageError):
        storage.save_data({})


def test_storage_remote_http_error(monkeypatch):
    monkeypatch.setattr(backend.storage.requests, "get",
                        lambda url, headers=None, timeout=None: FakeResponse(404, ""))
    with pytest.raises(StorageError):
        StorageManager("https://example.com/series-data.json").load_data()
