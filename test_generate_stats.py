import json

import pytest

from backend.models import MatchRecord, Roster, SeriesDocument, TeamStats
from generate_stats import (aggregate_series, build_stats, main, normalize_player_name,
                            strip_designations, top_list)
from series_config import DEFAULT_NAME_ALIASES

ENG = ["Joe Root", "Harry Brook", "Ben Stokes", "Jamie Smith", "Jofra Archer"]
AUS = ["Steve Smith", "Travis Head", "Marnus Labuschagne", "Pat Cummins", "Mitchell Starc"]


@pytest.fixture
def roster():
    return Roster(eng=ENG, aus=AUS)


def make_series(*team_stats_by_match):
    series = SeriesDocument.empty()
    for i, (eng, aus) in enumerate(team_stats_by_match, start=1):
        series.upsert(MatchRecord.model_validate({
            'matchId': str(i), 'date': '2025-11-21', 'playerStats': {'eng': eng, 'aus': aus},
        }))
    return series


def test_strip_designations():
    assert strip_designations("Joe Root (c)") == "Joe Root"
    assert strip_designations("Jamie Smith (wk)") == "Jamie Smith"
    assert strip_designations("Ben Stokes (c) (wk) ") == "Ben Stokes"


def test_exact_roster_match():
    assert normalize_player_name("Harry Brook", ENG, DEFAULT_NAME_ALIASES) == "Harry Brook"


def test_alias_always_applies():
    assert normalize_player_name("Steven Smith", AUS, DEFAULT_NAME_ALIASES) == "Steve Smith"
    assert normalize_player_name("Steven Smith", [], DEFAULT_NAME_ALIASES) == "Steve Smith"
    assert normalize_player_name("Marnus", AUS, DEFAULT_NAME_ALIASES) == "Marnus Labuschagne"
    assert normalize_player_name("Head (vc)", AUS, DEFAULT_NAME_ALIASES) == "Travis Head"


def test_unique_substring_match():
    assert normalize_player_name("Root (c)", ENG, DEFAULT_NAME_ALIASES) == "Joe Root"
    assert normalize_player_name("brook", ENG, DEFAULT_NAME_ALIASES) == "Harry Brook"


def test_initials_match_when_unique():
    assert normalize_player_name("J Root", ENG, DEFAULT_NAME_ALIASES) == "Joe Root"
    assert normalize_player_name("J. Root (c)", ENG, DEFAULT_NAME_ALIASES) == "Joe Root"


def test_initials_ambiguous_keeps_name():
    roster = ["Joe Root", "Jack Root"]
    assert normalize_player_name("J. Root (c)", roster, {}) == "J. Root"


def test_ambiguous_substring_keeps_stripped_name():
    # "Smith" is in both names
    roster = ["Steve Smith", "Jamie Smith"]
    assert normalize_player_name("Smith (wk)", roster, {}) == "Smith"


def test_no_match_keeps_stripped_name():
    assert normalize_player_name("Zak Crawley (c)", ENG, DEFAULT_NAME_ALIASES) == "Zak Crawley"


def test_designation_only_name_matches_nobody():
    assert normalize_player_name("(sub)", ["Joe Root"], {}) == ""
    assert normalize_player_name("  ", ENG, DEFAULT_NAME_ALIASES) == ""


def test_end_to_end_root(roster):
    series = make_series(
        ({'innings1': {"Root (c)": {'runs': 50, 'wickets': 0}},
          'innings2': {"J Root": {'runs': 30, 'wickets': 0}}}, {}),
    )
    totals = aggregate_series(series, Roster(eng=["Joe Root"]), DEFAULT_NAME_ALIASES)
    assert totals['eng']['runs'] == {"Joe Root": 80}


def test_aggregates_across_matches_and_shapes(roster):
    series = make_series(
        # older flat shape
        ({"Joe Root (c)": {'runs': 100, 'wickets': 0}, "Jofra Archer": {'runs': 4, 'wickets': 3}},
         {"Steven Smith": {'runs': 60, 'wickets': 0}}),
        # per-innings shape
        ({'innings1': {"Joe Root": {'runs': 20, 'wickets': 1}},
          'innings2': {"Archer": {'runs': 0, 'wickets': 5}}},
         {'innings1': {"Steve Smith (c)": {'runs': 40, 'wickets': 0}}}),
    )
    totals = aggregate_series(series, roster, DEFAULT_NAME_ALIASES)
    assert totals['eng']['runs'] == {"Joe Root": 120, "Jofra Archer": 4}
    assert totals['eng']['wickets'] == {"Joe Root": 1, "Jofra Archer": 8}
    assert totals['aus']['runs'] == {"Steve Smith": 100}


def test_top_list_five_strictly_descending():
    totals = {f"Player {i}": i * 10 for i in range(1, 8)}
    top = top_list(totals)
    assert len(top) == 5
    values = [e.value for e in top]
    assert values == sorted(values, reverse=True)
    assert len(set(values)) == 5
    assert top[0].name == "Player 7"


def test_top_list_ties_keep_first_seen_order():
    top = top_list({"B": 10, "A": 10, "C": 30})
    assert [e.name for e in top] == ["C", "B", "A"]


def test_build_stats_is_deterministic(roster):
    series = make_series(
        ({'innings1': {"Joe Root": {'runs': 40, 'wickets': 0}, "Ben Stokes": {'runs': 40, 'wickets': 2}}},
         {'innings1': {"Head": {'runs': 123, 'wickets': 0}}}),
    )
    first = build_stats(series, roster, DEFAULT_NAME_ALIASES).to_json_dict()
    second = build_stats(series, roster, DEFAULT_NAME_ALIASES).to_json_dict()
    first.pop('lastUpdated')
    second.pop('lastUpdated')
    assert first == second
    assert first['topRunScorers']['aus'] == [{'name': 'Travis Head', 'value': 123}]
    assert first['actualTiebreaker'] == 172


def test_main_writes_stats(tmp_path):
    series_file = tmp_path / "series-data.json"
    players_file = tmp_path / "players.json"
    stats_file = tmp_path / "series-stats.json"

    series = make_series(({'innings1': {"Root (c)": {'runs': 88, 'wickets': 0}}}, {}))
    series_file.write_text(json.dumps(series.to_json_dict()))
    players_file.write_text(json.dumps({'eng': ENG, 'aus': AUS}))

    assert main(str(series_file), str(players_file), str(stats_file)) == 0

    stats = json.loads(stats_file.read_text())
    assert stats['topRunScorers']['eng'][0] == {'name': 'Joe Root', 'value': 88}
    assert stats['topWicketTakers']['aus'] == []


def test_main_fails_without_series_data(tmp_path):
    players_file = tmp_path / "players.json"
    players_file.write_text(json.dumps({'eng': ENG, 'aus': AUS}))
    stats_file = tmp_path / "series-stats.json"

    assert main(str(tmp_path / "missing.json"), str(players_file), str(stats_file)) == 1
    assert not stats_file.exists()


def test_main_fails_on_malformed_roster(tmp_path):
    series_file = tmp_path / "series-data.json"
    series_file.write_text(json.dumps(SeriesDocument.empty().to_json_dict()))
    players_file = tmp_path / "players.json"
    players_file.write_text("{not json")

    assert main(str(series_file), str(players_file), str(tmp_path / "out.json")) == 1
