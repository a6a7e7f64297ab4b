import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from backend.engine import LeaderboardProcessor
from backend.storage import StorageError

logger = logging.getLogger(__name__)

app = FastAPI(title="Ashes Predictions Leaderboard")

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_processor() -> LeaderboardProcessor:
    return LeaderboardProcessor.from_config()


def _load(processor: LeaderboardProcessor):
    try:
        return processor.calculate_leaderboard()
    except StorageError as e:
        logger.error("Could not load leaderboard data: %s", e)
        raise HTTPException(status_code=503, detail=str(e))


@app.get("/api/leaderboard")
def get_leaderboard(processor: LeaderboardProcessor = Depends(get_processor)):
    leaderboard, series, stats = _load(processor)
    return {
        "lastUpdated": stats.last_updated,
        "seriesScore": series.series_score.to_json_dict(),
        "participants": [row.to_json_dict() for row in leaderboard],
    }


@app.get("/api/stats")
def get_stats(processor: LeaderboardProcessor = Depends(get_processor)):
    _, _, stats = _load(processor)
    return stats.to_json_dict()


@app.get("/api/series")
def get_series(processor: LeaderboardProcessor = Depends(get_processor)):
    _, series, _ = _load(processor)
    return series.to_json_dict()


@app.get("/api/rules")
def get_rules(processor: LeaderboardProcessor = Depends(get_processor)):
    return processor.calculator.rules()
