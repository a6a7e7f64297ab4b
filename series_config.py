"""
Ashes Predictions configuration.

File locations, competition constants and the static lookup tables used by
the scraper and the stats generator.
"""

import os

# --- Data File Paths ---
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.environ.get("ASHES_DATA_DIR", os.path.join(PROJECT_ROOT, "data"))

SERIES_DATA_FILE = os.path.join(DATA_DIR, "series-data.json")
SERIES_STATS_FILE = os.path.join(DATA_DIR, "series-stats.json")
PLAYERS_FILE = os.path.join(DATA_DIR, "players.json")
PARTICIPANTS_FILE = os.path.join(DATA_DIR, "participants.json")
SCHEDULE_FILE = os.path.join(DATA_DIR, "schedule.json")

# Base URL the leaderboard reads published documents from, e.g. a raw content
# URL for the data directory. Unset means read the local files.
REMOTE_DATA_URL = os.environ.get("ASHES_REMOTE_DATA_URL")

# --- Competition ---
TEAMS = ("eng", "aus")
TEAM_NAMES = {"eng": "England", "aus": "Australia"}

TOTAL_MATCHES = 5
TOP_LIST_SIZE = 5

# Runs in the 1st innings of the 1st Test (England batted first: 172).
# Fixed now that the innings is complete.
ACTUAL_TIEBREAKER = 172

# Shown in place of a leader before anyone has scored.
PLACEHOLDER_NAME = "TBD"

# Scraped short names that never resolve through the roster on their own
DEFAULT_NAME_ALIASES = {
    "Steven Smith": "Steve Smith",
    "Marnus": "Marnus Labuschagne",
    "Pat": "Pat Cummins",
    "Head": "Travis Head",
}

# --- Scraping ---
REQUEST_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
}
REQUEST_TIMEOUT = 20

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
