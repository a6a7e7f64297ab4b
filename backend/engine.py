import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from pydantic import ValidationError

from backend.models import AggregatedStats, Participant, RankedParticipant, SeriesDocument
from backend.storage import StorageError, StorageManager
from prediction_score_calculator import PredictionScoreCalculator
import series_config

logger = logging.getLogger(__name__)


def document_source(filename: str, local_path: str, remote_base: Optional[str] = None) -> str:
    """Remote URL under remote_base if one is configured, otherwise the local path."""
    if remote_base:
        return f"{remote_base.rstrip('/')}/{filename}"
    return local_path


class LeaderboardProcessor:
    """
    Builds the leaderboard from the published documents.

    Nothing is cached: every call re-reads the documents and recomputes
    points and ranks.
    """

    def __init__(self, series_source: str, stats_source: str, participants_source: str,
                 calculator: Optional[PredictionScoreCalculator] = None):
        self.series_storage = StorageManager(series_source)
        self.stats_storage = StorageManager(stats_source)
        self.participants_storage = StorageManager(participants_source)
        self.calculator = calculator or PredictionScoreCalculator()

    @classmethod
    def from_config(cls, remote_base: Optional[str] = series_config.REMOTE_DATA_URL):
        return cls(
            series_source=document_source("series-data.json", series_config.SERIES_DATA_FILE, remote_base),
            stats_source=document_source("series-stats.json", series_config.SERIES_STATS_FILE, remote_base),
            participants_source=series_config.PARTICIPANTS_FILE,
        )

    def load_documents(self) -> Tuple[SeriesDocument, AggregatedStats]:
        """Fetch series data and stats together; both must succeed."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            series_future = pool.submit(self.series_storage.load_data)
            stats_future = pool.submit(self.stats_storage.load_data)
            series_raw, stats_raw = series_future.result(), stats_future.result()

        try:
            return SeriesDocument.model_validate(series_raw), AggregatedStats.model_validate(stats_raw)
        except ValidationError as e:
            raise StorageError(f"Invalid series document: {e}") from e

    def load_participants(self) -> List[Participant]:
        raw = self.participants_storage.load_data()
        try:
            return [Participant.model_validate(p) for p in raw]
        except (TypeError, ValidationError) as e:
            raise StorageError(f"Invalid participants file: {e}") from e

    def calculate_leaderboard(self) -> Tuple[List[RankedParticipant], SeriesDocument, AggregatedStats]:
        series, stats = self.load_documents()
        participants = self.load_participants()
        leaderboard = self.calculator.rank_participants(participants, series.series_score, stats)
        logger.debug("Ranked %d participants", len(leaderboard))
        return leaderboard, series, stats
