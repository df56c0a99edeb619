"""Partition curated tweets by day and across reviewers."""

import logging
from datetime import UTC, date

from newsletter_digest.curation.stages import sort_by_retweets
from newsletter_digest.data import Tweet

logger = logging.getLogger(__name__)


def tweet_day(tweet: Tweet) -> date:
    """UTC calendar day a tweet was created on."""
    return tweet.created_at.astimezone(UTC).date()


def group_by_day(tweets: list[Tweet]) -> dict[date, list[Tweet]]:
    """Bucket tweets by UTC creation day.

    Buckets iterate in ascending day order; within a bucket tweets keep their
    input order.
    """
    buckets: dict[date, list[Tweet]] = {}
    for tweet in tweets:
        buckets.setdefault(tweet_day(tweet), []).append(tweet)
    return {day: buckets[day] for day in sorted(buckets)}


def distribute_to_reviewers(
    tweets: list[Tweet],
    reviewers: list[str],
) -> dict[str, list[Tweet]]:
    """Deal tweets to reviewers round-robin.

    Tweet ``i`` of the (already ranked) input goes to ``reviewers[i % N]``.
    Each reviewer's bucket is then re-sorted by retweets, most retweeted first.
    Every reviewer gets a key, in reviewer order, even when its bucket is empty.

    Raises:
        ValueError: If ``reviewers`` is empty or has duplicates.
    """
    if not reviewers:
        raise ValueError("At least one reviewer is required")
    if len(set(reviewers)) != len(reviewers):
        raise ValueError(f"Reviewer names must be unique: {reviewers}")

    buckets: dict[str, list[Tweet]] = {name: [] for name in reviewers}
    for i, tweet in enumerate(tweets):
        buckets[reviewers[i % len(reviewers)]].append(tweet)

    for name, bucket in buckets.items():
        logger.info(f"{name} : {len(bucket)}")

    return {name: sort_by_retweets(bucket) for name, bucket in buckets.items()}
