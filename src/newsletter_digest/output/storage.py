"""Persist day buckets as JSON files that CachedTweetSource can read back."""

import json
import logging
from datetime import date
from pathlib import Path

from newsletter_digest.data import Tweet

logger = logging.getLogger(__name__)


def day_file_name(day: date) -> str:
    return f"tweets for {day.isoformat()}.json"


def save_day_files(days: dict[date, list[Tweet]], data_path: Path | str) -> list[Path]:
    """Write one JSON array file per day bucket.

    Args:
        days: Day buckets, as produced by ``group_by_day``.
        data_path: Directory to write into (created if missing).

    Returns:
        Paths of the written files, in bucket order.
    """
    data_dir = Path(data_path)
    data_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for day, tweets in days.items():
        file_path = data_dir / day_file_name(day)
        payload = [tweet.to_api() for tweet in tweets]
        file_path.write_text(json.dumps(payload, indent="\t", ensure_ascii=False), encoding="utf-8")
        logger.info(f"{day:%a %b %d %Y} : {len(tweets)}")
        written.append(file_path)
    return written
