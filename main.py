import logging
import sys

from backend.engine import LeaderboardProcessor
from backend.storage import StorageError
import series_config


def format_leaderboard(leaderboard):
    lines = [
        f"{'#':<4} | {'Participant':<20} | {'Pts':<3} | {'Series':<14} | {'TB diff'}",
        "-" * 60,
    ]
    for row in leaderboard:
        series = f"{row.series_score} {row.series_winner}"
        lines.append(f"{row.rank:<4} | {row.name:<20} | {row.total_points:<3} | {series:<14} | {row.tiebreaker_diff}")
    return "\n".join(lines)


def main():
    print("--- Ashes Predictions Leaderboard ---\n")

    processor = LeaderboardProcessor.from_config()
    try:
        leaderboard, series, _ = processor.calculate_leaderboard()
    except StorageError as e:
        logging.getLogger("main").error("Could not build leaderboard: %s", e)
        return 1

    score = series.series_score
    print(f"Series: England {score.england} - {score.australia} Australia ({score.draw} drawn)\n")
    print(format_leaderboard(leaderboard))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=series_config.LOG_FORMAT)
    sys.exit(main())
