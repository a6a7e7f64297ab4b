"""
Cricbuzz scorecard scraper for the Ashes series.

Reads one match's scorecard page and turns it into a MatchRecord:
innings scores plus per-innings runs and wickets for every player.
"""

import logging
import re
from datetime import date
from typing import Dict, Iterable, Optional

import requests
from bs4 import BeautifulSoup

from backend.models import MatchRecord, MatchWindow, SeriesScore, TeamStats
from series_config import REQUEST_HEADERS, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

MATCH_ID_PATTERN = re.compile(r'live-cricket-scorecard/(\d+)/')
LEADING_INT = re.compile(r'\s*(-?\d+)')


class ScrapeError(Exception):
    """The scorecard could not be fetched or parsed."""


def get_match_id_from_url(url: str) -> Optional[str]:
    match = MATCH_ID_PATTERN.search(url or '')
    return match.group(1) if match else None


def to_scorecard_url(url: str) -> str:
    """Ensure we are requesting the scorecard page"""
    if '/live-cricket-scores/' in url:
        return url.replace('/live-cricket-scores/', '/live-cricket-scorecard/')
    if '/cricket-scores/' in url:
        return url.replace('/cricket-scores/', '/live-cricket-scorecard/')
    return url


def get_current_match_url(schedule: Iterable[MatchWindow], today: date) -> Optional[str]:
    """URL of the match whose scheduled days include today, if any."""
    for window in schedule:
        if window.contains(today):
            logger.info("Auto-detected match: %s (%s to %s)", window.name, *window.dates)
            return window.url
    return None


def parse_int(text: str) -> int:
    """Leading integer of a scorecard cell; anything unparsable counts as 0."""
    match = LEADING_INT.match(text or '')
    return int(match.group(1)) if match else 0


def tally_series_score(matches: Dict[str, MatchRecord]) -> SeriesScore:
    """Recount England/Australia wins and draws from the stored match results."""
    score = SeriesScore()
    for record in matches.values():
        result = (record.result or '').lower()
        if re.search(r'\b(england|eng) won\b', result):
            score.england += 1
        elif re.search(r'\b(australia|aus) won\b', result):
            score.australia += 1
        elif 'drawn' in result or re.search(r'\bdraw\b', result):
            score.draw += 1
    return score


class CricbuzzScraper:
    def __init__(self, headers=None, timeout=REQUEST_TIMEOUT):
        self.headers = headers or REQUEST_HEADERS
        self.timeout = timeout

    def fetch_match_data(self, url: str, today: Optional[date] = None) -> MatchRecord:
        """
        Fetches a Cricbuzz scorecard URL and parses it into a MatchRecord.

        Raises ScrapeError on a non-2xx response, a network error, a page that
        cannot be parsed, or a URL with no match id. Nothing is written here.
        """
        url = to_scorecard_url(url)
        match_id = get_match_id_from_url(url)
        if not match_id:
            raise ScrapeError(f"Could not extract match ID from URL: {url}")

        logger.info("Fetching data from %s", url)
        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise ScrapeError(f"Error fetching URL: {e}") from e

        if not response.ok:
            raise ScrapeError(f"Failed to fetch page: {response.status_code} {response.reason}")

        try:
            return self.parse_scorecard(response.text, match_id, today or date.today())
        except Exception as e:
            raise ScrapeError(f"Could not parse scorecard for match {match_id}: {e}") from e

    def parse_scorecard(self, html: str, match_id: str, today: date) -> MatchRecord:
        soup = BeautifulSoup(html, 'html.parser')

        title = soup.find('h1')
        if title:
            logger.info("Page title: %s", title.get_text().strip().split('-')[0].strip())

        status_tag = soup.select_one('.text-cbLive')
        status = status_tag.get_text().strip() if status_tag else ''
        logger.info("Match status: %s", status or 'unknown')

        player_stats = {'eng': TeamStats(), 'aus': TeamStats()}
        scores = {'eng': [], 'aus': []}

        # Innings numbers per team: one counter for batting, one for bowling
        batting_count = {'eng': 0, 'aus': 0}
        bowling_count = {'eng': 0, 'aus': 0}
        processed_ids = set()

        for inning in soup.select('div[id^="team-"]'):
            inning_id = inning.get('id') or ''
            if not inning_id or inning_id in processed_ids or 'innings' not in inning_id:
                continue
            processed_ids.add(inning_id)

            heading = inning.select_one('.font-bold')  # e.g. "ENG 1st Innings"
            team_name = heading.get_text().strip().upper() if heading else ''
            if 'ENG' in team_name:
                team_key = 'eng'
            elif 'AUS' in team_name:
                team_key = 'aus'
            else:
                continue

            score_tag = inning.select_one('span.font-bold')  # e.g. "172-10"
            scores[team_key].append(score_tag.get_text().strip() if score_tag else '')

            bowling_key = 'aus' if team_key == 'eng' else 'eng'
            batting_count[team_key] += 1
            bowling_count[bowling_key] += 1

            scorecard = soup.find(id=f"scard-{inning_id}")
            if scorecard is None:
                logger.debug("No scorecard section for %s", inning_id)
                continue

            # Batting: runs in the 2nd column
            for row in scorecard.select('.scorecard-bat-grid'):
                name_tag = row.find('a')
                if name_tag is None:
                    continue  # Header row or empty
                cols = row.find_all(recursive=False)
                runs = parse_int(cols[1].get_text()) if len(cols) > 1 else 0
                player_stats[team_key].add(batting_count[team_key], name_tag.get_text().strip(), runs=runs)

            # Bowling (opposing team): wickets in the 5th column
            for row in scorecard.select('.scorecard-bowl-grid'):
                name_tag = row.find('a')
                if name_tag is None:
                    continue
                cols = row.find_all(recursive=False)
                wickets = parse_int(cols[4].get_text()) if len(cols) > 4 else 0
                player_stats[bowling_key].add(bowling_count[bowling_key], name_tag.get_text().strip(), wickets=wickets)

        logger.info("Parsed %d innings for match %s", len(processed_ids), match_id)

        return MatchRecord(
            match_id=match_id,
            date=today.isoformat(),
            status=status,
            result=status,
            scores={team: ' & '.join(s for s in parts if s) or '0/0' for team, parts in scores.items()},
            player_stats=player_stats,
        )
