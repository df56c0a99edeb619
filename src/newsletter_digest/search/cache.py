"""Offline tweet source reading previously saved day files."""

import json
import logging
from pathlib import Path

from newsletter_digest.data import Tweet
from newsletter_digest.exceptions import CacheError

logger = logging.getLogger(__name__)


class CachedTweetSource:
    """Read tweets from the JSON day files in a data directory.

    Each ``*.json`` file holds a JSON array of API-shaped statuses, as written
    by ``newsletter_digest.output.save_day_files``. Files are read in name
    order and concatenated; other files are ignored.

    Args:
        data_path: Directory holding the day files.
    """

    def __init__(self, data_path: Path | str) -> None:
        self._data_path = Path(data_path)

    async def fetch_tweets(self) -> list[Tweet]:
        """Return the concatenated tweets of every day file.

        Raises:
            CacheError: If the directory is missing or a file is malformed.
        """
        if not self._data_path.is_dir():
            raise CacheError(f"Cache directory not found: {self._data_path}")

        tweets: list[Tweet] = []
        for file_path in sorted(self._data_path.glob("*.json")):
            logger.info(f"Reading cached tweets from {file_path}")
            try:
                statuses = json.loads(file_path.read_text(encoding="utf-8"))
                if not isinstance(statuses, list):
                    raise ValueError("expected a JSON array")
                tweets.extend(Tweet.from_api(status) for status in statuses)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                raise CacheError(f"Could not read cached tweets from {file_path}: {e}") from e

        logger.info(f"Loaded {len(tweets)} cached tweets")
        return tweets
