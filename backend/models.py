import re
from datetime import date, datetime, timezone
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic.alias_generators import to_camel

INNINGS_KEY = re.compile(r'^innings(\d+)$')


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2025-11-21T09:30:00.000Z"""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class DocumentModel(BaseModel):
    """camelCase on disk, snake_case in Python. Either spelling is accepted on load."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)


class PlayerStats(DocumentModel):
    runs: int = 0
    wickets: int = 0


class TeamStats(DocumentModel):
    """
    One team's figures in a match, keyed by innings index (1, 2, ...).

    Written as {"innings1": {...}, "innings2": {...}}. The older flat shape,
    {player: {runs, wickets}}, loads as innings 1.
    """
    innings: Dict[int, Dict[str, PlayerStats]] = Field(default_factory=dict)

    @model_validator(mode='before')
    @classmethod
    def _unify_shapes(cls, data):
        if not isinstance(data, dict):
            return data
        if set(data.keys()) == {'innings'}:
            return data
        if not data:
            return {'innings': {}}

        matches = {key: INNINGS_KEY.match(str(key)) for key in data}
        if all(matches.values()):
            return {'innings': {int(m.group(1)): data[key] for key, m in matches.items()}}
        return {'innings': {1: data}}

    @model_serializer(mode='plain')
    def _to_innings_keys(self) -> dict:
        return {
            f"innings{index}": {name: stats.model_dump() for name, stats in players.items()}
            for index, players in sorted(self.innings.items())
        }

    def add(self, innings_index: int, name: str, runs: int = 0, wickets: int = 0):
        """Accumulate runs/wickets for a player in the given innings."""
        players = self.innings.setdefault(innings_index, {})
        stats = players.setdefault(name, PlayerStats())
        stats.runs += runs
        stats.wickets += wickets

    def entries(self) -> Iterator[Tuple[int, str, PlayerStats]]:
        for index, players in sorted(self.innings.items()):
            for name, stats in players.items():
                yield index, name, stats


def _empty_team_stats() -> Dict[str, TeamStats]:
    return {'eng': TeamStats(), 'aus': TeamStats()}


class MatchRecord(DocumentModel):
    match_id: str
    date: str
    status: str = ""
    result: str = ""
    scores: Dict[str, str] = Field(default_factory=lambda: {'eng': '0/0', 'aus': '0/0'})
    player_stats: Dict[str, TeamStats] = Field(default_factory=_empty_team_stats)


class SeriesScore(DocumentModel):
    england: int = 0
    australia: int = 0
    draw: int = 0

    @property
    def completed(self) -> int:
        return self.england + self.australia + self.draw

    def is_complete(self, total_matches: int = 5) -> bool:
        return self.completed >= total_matches

    @property
    def winner(self) -> str:
        if self.england > self.australia:
            return "England"
        if self.australia > self.england:
            return "Australia"
        return "Draw"

    @property
    def score_line(self) -> str:
        """Series score as predicted, winner's count first: '3-1'"""
        high, low = max(self.england, self.australia), min(self.england, self.australia)
        return f"{high}-{low}"


class SeriesDocument(DocumentModel):
    last_updated: str = ""
    series_score: SeriesScore = Field(default_factory=SeriesScore)
    matches: Dict[str, MatchRecord] = Field(default_factory=dict)

    @classmethod
    def empty(cls, now: Optional[datetime] = None) -> "SeriesDocument":
        return cls(last_updated=utc_timestamp(now))

    def upsert(self, record: MatchRecord, now: Optional[datetime] = None):
        """Replace the stored record for this match id (never merged field by field)."""
        self.matches[record.match_id] = record
        self.last_updated = utc_timestamp(now)


class LeaderEntry(DocumentModel):
    name: str
    value: int = Field(default=0, validation_alias=AliasChoices('value', 'runs', 'wickets'))


class AggregatedStats(DocumentModel):
    last_updated: str = ""
    actual_tiebreaker: Optional[int] = None
    top_run_scorers: Dict[str, List[LeaderEntry]] = Field(default_factory=dict)
    top_wicket_takers: Dict[str, List[LeaderEntry]] = Field(default_factory=dict)

    def leader(self, category: str, team: str) -> Optional[LeaderEntry]:
        """#1 entry for category 'runs' or 'wickets', or None if the list is empty."""
        lists = self.top_run_scorers if category == 'runs' else self.top_wicket_takers
        entries = lists.get(team) or []
        return entries[0] if entries else None


class Roster(DocumentModel):
    eng: List[str] = Field(default_factory=list)
    aus: List[str] = Field(default_factory=list)

    def names(self, team: str) -> List[str]:
        return getattr(self, team, [])


class MatchWindow(DocumentModel):
    name: str
    dates: Tuple[str, str]
    url: str

    def contains(self, day: date) -> bool:
        start, end = self.dates
        return start <= day.isoformat() <= end


class Participant(DocumentModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    series_score: str
    series_winner: str
    lead_run_scorer_eng: str
    lead_run_scorer_aus: str
    lead_wkt_taker_eng: str
    lead_wkt_taker_aus: str
    tiebreaker: int


class RankedParticipant(Participant):
    total_points: int = 0
    rank: int = 0
    tiebreaker_diff: int = 0
    correct_series_winner: bool = False
    correct_series_score: bool = False
    correct_eng_run_scorer: bool = False
    correct_aus_run_scorer: bool = False
    correct_eng_wkt_taker: bool = False
    correct_aus_wkt_taker: bool = False
