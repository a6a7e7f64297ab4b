"""
Scrape one Ashes scorecard and upsert it into series-data.json.

Usage: python update_scores.py [URL] [--date YYYY-MM-DD] [--recount-series]

Without a URL, falls back to $MATCH_URL, then to the match scheduled for
today in schedule.json.
"""

import argparse
import logging
import os
import sys
from datetime import date

from dotenv import load_dotenv
from pydantic import ValidationError

from backend.models import MatchWindow, SeriesDocument
from backend.storage import StorageError, StorageManager
from cricbuzz_scraper import CricbuzzScraper, ScrapeError, get_current_match_url, tally_series_score
import series_config

logger = logging.getLogger("update_scores")


def load_schedule(path):
    """Match windows from the schedule file; an unreadable schedule means no auto-detection."""
    try:
        data = StorageManager(path).load_data()
        return [MatchWindow.model_validate(m) for m in data.get('matches', [])]
    except (StorageError, ValidationError, AttributeError) as e:
        logger.warning("Could not load match schedule %s: %s", path, e)
        return []


def load_series(storage):
    """Existing series document, or a fresh one if the file is missing or invalid."""
    try:
        return SeriesDocument.model_validate(storage.load_data())
    except (StorageError, ValidationError) as e:
        logger.info("Starting fresh series data (%s)", e)
        return SeriesDocument.empty()


def resolve_url(cli_url, today, schedule_file):
    if cli_url:
        return cli_url
    env_url = os.environ.get('MATCH_URL')
    if env_url:
        return env_url
    logger.info("No URL provided, attempting to auto-detect current match...")
    return get_current_match_url(load_schedule(schedule_file), today)


def parse_args(argv):
    parser = argparse.ArgumentParser(description="Update series-data.json from a Cricbuzz scorecard")
    parser.add_argument('url', nargs='?', help="Cricbuzz scorecard URL")
    parser.add_argument('--date', type=date.fromisoformat, default=None,
                        help="Date used for auto-detection and the match record (default: today)")
    parser.add_argument('--data-file', default=series_config.SERIES_DATA_FILE)
    parser.add_argument('--schedule-file', default=series_config.SCHEDULE_FILE)
    parser.add_argument('--recount-series', action='store_true',
                        help="Recompute the series score from stored match results")
    return parser.parse_args(argv)


def main(argv=None, scraper=None):
    load_dotenv()
    args = parse_args(argv)
    today = args.date or date.today()

    url = resolve_url(args.url, today, args.schedule_file)
    if not url:
        logger.error("No URL provided and could not auto-detect current match. No match is scheduled for %s.", today)
        logger.error("Usage: python update_scores.py [URL]")
        return 1

    storage = StorageManager(args.data_file)
    series = load_series(storage)

    scraper = scraper or CricbuzzScraper()
    try:
        record = scraper.fetch_match_data(url, today=today)
    except ScrapeError as e:
        logger.error("Error scraping Cricbuzz: %s", e)
        return 1

    series.upsert(record)
    if args.recount_series:
        series.series_score = tally_series_score(series.matches)
        logger.info("Series score recounted: %s", series.series_score.model_dump())

    try:
        storage.save_data(series.to_json_dict())
    except StorageError as e:
        logger.error("Error updating scores: %s", e)
        return 1

    logger.info("Series data updated successfully for match %s!", record.match_id)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=series_config.LOG_FORMAT)
    sys.exit(main())
