"""
Regenerate series-stats.json from series-data.json.

Sums every player's runs and wickets across all recorded innings, resolves
scraped names against the official squads in players.json and keeps the
top five run scorers and wicket takers per team.
"""

import logging
import re
import sys
from typing import Dict, List, Mapping, Optional, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from backend.models import AggregatedStats, LeaderEntry, Roster, SeriesDocument, utc_timestamp
from backend.storage import StorageError, StorageManager
import series_config

logger = logging.getLogger("generate_stats")

DESIGNATION = re.compile(r'\s*\([^)]*\)\s*')


def strip_designations(name: str) -> str:
    """'Joe Root (c)' -> 'Joe Root', 'Jamie Smith (wk)' -> 'Jamie Smith'"""
    return ' '.join(DESIGNATION.sub(' ', name).split())


def _is_initials_form(name: str, full_name: str) -> bool:
    """'J Root' / 'J. Root' against 'Joe Root': same surname, given names abbreviated."""
    tokens = name.lower().replace('.', ' ').split()
    full_tokens = full_name.lower().split()
    if len(tokens) < 2 or len(tokens) != len(full_tokens):
        return False
    if tokens[-1] != full_tokens[-1]:
        return False
    return all(full.startswith(short) for short, full in zip(tokens[:-1], full_tokens[:-1]))


def normalize_player_name(raw_name: str, roster_names: Sequence[str], aliases: Mapping[str, str]) -> str:
    """
    Resolve a scraped name to the official roster spelling.

    1. Strip designations like (c), (wk).
    2. Exact roster match wins.
    3. Known short names come from the alias table.
    4. Otherwise a roster entry that contains the name (or is contained by it,
       case-insensitive), or that the name abbreviates, is used if it is the
       only one. No match or several matches keep the stripped name.
    """
    name = strip_designations(raw_name)
    if not name:
        return name
    if name in roster_names:
        return name
    if name in aliases:
        return aliases[name]

    lowered = name.lower()
    candidates = [
        official for official in roster_names
        if lowered in official.lower() or official.lower() in lowered or _is_initials_form(name, official)
    ]
    if len(candidates) == 1:
        return candidates[0]
    return name


def aggregate_series(series: SeriesDocument, roster: Roster, aliases: Mapping[str, str],
                     teams: Sequence[str] = series_config.TEAMS) -> Dict[str, Dict[str, Dict[str, int]]]:
    """Per-team running totals: {team: {'runs': {name: n}, 'wickets': {name: n}}}"""
    totals = {team: {'runs': {}, 'wickets': {}} for team in teams}

    for record in series.matches.values():
        for team in teams:
            team_stats = record.player_stats.get(team)
            if team_stats is None:
                continue
            runs, wickets = totals[team]['runs'], totals[team]['wickets']
            for _, raw_name, stats in team_stats.entries():
                name = normalize_player_name(raw_name, roster.names(team), aliases)
                runs[name] = runs.get(name, 0) + stats.runs
                wickets[name] = wickets.get(name, 0) + stats.wickets

    return totals


def top_list(totals: Mapping[str, int], limit: int = series_config.TOP_LIST_SIZE) -> List[LeaderEntry]:
    # sorted() is stable: equal totals keep their first-seen order
    ranked = sorted(totals.items(), key=lambda item: -item[1])
    return [LeaderEntry(name=name, value=value) for name, value in ranked[:limit]]


def build_stats(series: SeriesDocument, roster: Roster, aliases: Mapping[str, str],
                actual_tiebreaker: Optional[int] = series_config.ACTUAL_TIEBREAKER,
                now=None) -> AggregatedStats:
    totals = aggregate_series(series, roster, aliases)
    return AggregatedStats(
        last_updated=utc_timestamp(now),
        actual_tiebreaker=actual_tiebreaker,
        top_run_scorers={team: top_list(t['runs']) for team, t in totals.items()},
        top_wicket_takers={team: top_list(t['wickets']) for team, t in totals.items()},
    )


def main(series_file=None, players_file=None, stats_file=None):
    load_dotenv()
    series_file = series_file or series_config.SERIES_DATA_FILE
    players_file = players_file or series_config.PLAYERS_FILE
    stats_file = stats_file or series_config.SERIES_STATS_FILE

    try:
        series = SeriesDocument.model_validate(StorageManager(series_file).load_data())
        roster = Roster.model_validate(StorageManager(players_file).load_data())

        stats = build_stats(series, roster, series_config.DEFAULT_NAME_ALIASES)
        StorageManager(stats_file).save_data(stats.to_json_dict())
    except (StorageError, ValidationError) as e:
        logger.error("Error generating stats: %s", e)
        return 1

    logger.info("Series stats generated successfully from %d matches!", len(series.matches))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=series_config.LOG_FORMAT)
    sys.exit(main())
