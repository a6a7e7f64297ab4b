"""
Ashes Prediction Score Calculator
Scores each participant's predictions against the live series state:
- Series winner and exact series score (only once all Tests are decided)
- Leading run scorer and wicket taker for each team (as soon as a leader exists)
One point per correct call, six at most.
"""

from typing import Dict, List, Optional

from backend.models import AggregatedStats, Participant, RankedParticipant, SeriesScore
from series_config import PLACEHOLDER_NAME, TOTAL_MATCHES


class PredictionScoreCalculator:
    """
    Calculates leaderboard points and ranks participants.

    Ranking: points descending, then distance from the actual tiebreaker
    ascending. Participants level on both share a rank.
    """

    # flag -> (category, team, participant attribute)
    LEADER_CHECKS = {
        'correct_eng_run_scorer': ('runs', 'eng', 'lead_run_scorer_eng'),
        'correct_aus_run_scorer': ('runs', 'aus', 'lead_run_scorer_aus'),
        'correct_eng_wkt_taker': ('wickets', 'eng', 'lead_wkt_taker_eng'),
        'correct_aus_wkt_taker': ('wickets', 'aus', 'lead_wkt_taker_aus'),
    }

    def __init__(self, total_matches: int = TOTAL_MATCHES, placeholder: str = PLACEHOLDER_NAME):
        self.total_matches = total_matches
        self.placeholder = placeholder

    def rules(self) -> Dict:
        """Scoring rules as shown on the Rules page."""
        return {
            'scoring': [
                f"1 point for the correct series winner (awarded once all {self.total_matches} Tests are decided)",
                f"1 point for the correct series score (awarded once all {self.total_matches} Tests are decided)",
                "1 point for the leading run scorer (each team)",
                "1 point for the leading wicket taker (each team)",
            ],
            'max_points': 2 + len(self.LEADER_CHECKS),
            'tiebreaker': "Total runs scored in the 1st innings of the 1st Test. Closest prediction wins.",
        }

    def get_score_breakdown(self, participant: Participant, series_score: SeriesScore,
                            stats: AggregatedStats) -> Dict:
        """
        Returns which predictions are currently correct, plus the points total.
        Useful for debugging and UI display.
        """
        complete = series_score.is_complete(self.total_matches)

        breakdown = {
            'correct_series_winner': complete and participant.series_winner == series_score.winner,
            'correct_series_score': complete and participant.series_score.strip() == series_score.score_line,
        }

        for flag, (category, team, attr) in self.LEADER_CHECKS.items():
            breakdown[flag] = self._is_leader(getattr(participant, attr), stats, category, team)

        breakdown['total_points'] = sum(1 for flag, value in breakdown.items() if value is True)
        return breakdown

    def _is_leader(self, predicted: str, stats: AggregatedStats, category: str, team: str) -> bool:
        leader = stats.leader(category, team)
        # a leader on zero (e.g. nobody has bowled yet) is not a leader
        if leader is None or leader.name == self.placeholder or leader.value <= 0:
            return False
        return predicted == leader.name

    def calculate_score(self, participant: Participant, series_score: SeriesScore,
                        stats: AggregatedStats) -> int:
        return self.get_score_breakdown(participant, series_score, stats)['total_points']

    @staticmethod
    def tiebreaker_diff(participant: Participant, actual: Optional[int]) -> int:
        if actual is None:
            return 0
        return abs(participant.tiebreaker - actual)

    def rank_participants(self, participants: List[Participant], series_score: SeriesScore,
                          stats: AggregatedStats) -> List[RankedParticipant]:
        scored = []
        for p in participants:
            breakdown = self.get_score_breakdown(p, series_score, stats)
            scored.append(RankedParticipant(
                **p.model_dump(),
                **breakdown,
                tiebreaker_diff=self.tiebreaker_diff(p, stats.actual_tiebreaker),
            ))

        # Stable: equal rows keep their input order
        scored.sort(key=lambda r: (-r.total_points, r.tiebreaker_diff))

        ranked = []
        for index, row in enumerate(scored):
            previous = ranked[-1] if ranked else None
            if previous and (previous.total_points, previous.tiebreaker_diff) == (row.total_points, row.tiebreaker_diff):
                rank = previous.rank
            else:
                rank = index + 1
            ranked.append(row.model_copy(update={'rank': rank}))
        return ranked
