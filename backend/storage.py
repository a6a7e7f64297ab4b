import json
import logging
import os

import requests

from series_config import REQUEST_HEADERS, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """A JSON document could not be read, parsed or written."""


def is_remote(source):
    return source.startswith('http://') or source.startswith('https://')


class StorageManager:
    """
    Reads and writes one JSON document.

    The source is either a local file path or an http(s) URL. Remote
    documents are read-only.
    """

    def __init__(self, source):
        self.source = source
        self.use_remote = is_remote(source)

    def load_data(self):
        """Load and parse the document. Raises StorageError on any failure."""
        if self.use_remote:
            return self._load_remote()

        try:
            with open(self.source, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read {self.source}: {e}") from e

    def _load_remote(self):
        logger.debug("Fetching %s", self.source)
        try:
            response = requests.get(self.source, headers=REQUEST_HEADERS, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise StorageError(f"Could not fetch {self.source}: {e}") from e

    def save_data(self, data):
        """Save data: Atomic Rename Pattern (Tmp -> Rename)."""
        if self.use_remote:
            raise StorageError(f"Remote document {self.source} is read-only")

        try:
            json_str = json.dumps(data, indent=2, ensure_ascii=False)

            directory = os.path.dirname(self.source)
            if directory:
                os.makedirs(directory, exist_ok=True)

            tmp_file = self.source + ".tmp"
            with open(tmp_file, 'w', encoding='utf-8') as f:
                f.write(json_str)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())

            # Overwrites target in one step; readers never see a partial file
            os.replace(tmp_file, self.source)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Could not write {self.source}: {e}") from e

        logger.debug("Wrote %s", self.source)
