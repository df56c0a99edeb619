"""Curation stages that narrow raw search results down to newsletter candidates.

Stage order matters: later stages assume earlier ones already ran. In
particular ``UniqueLinksStage`` keeps the *first* tweet per link, which is the
most retweeted one only because ``SortByRetweetsStage`` ran first.
"""

import logging

from newsletter_digest.curation.base import CurationStage
from newsletter_digest.data import Tweet
from newsletter_digest.url import link_key

logger = logging.getLogger(__name__)


def sort_by_retweets(tweets: list[Tweet]) -> list[Tweet]:
    """Stable sort, most retweeted first. Ties keep their input order."""
    return sorted(tweets, key=lambda t: t.retweet_count, reverse=True)


class SortByRetweetsStage:
    """Rank tweets by retweet count, descending."""

    name = "sort_by_retweets"

    def apply(self, tweets: list[Tweet]) -> list[Tweet]:
        return sort_by_retweets(tweets)


class OriginalTweetsStage:
    """Keep original tweets that link somewhere.

    Replies, quotes, retweets and tweets without URLs are dropped.
    """

    name = "original_tweets"

    def apply(self, tweets: list[Tweet]) -> list[Tweet]:
        return [
            t for t in tweets if not t.is_reply and not t.is_quote and not t.is_repost and t.urls
        ]


class MinRetweetsStage:
    """Keep tweets retweeted at least ``threshold`` times.

    Args:
        threshold: Minimum retweet count (inclusive).
    """

    name = "min_retweets"

    def __init__(self, threshold: int) -> None:
        if threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {threshold}")
        self._threshold = threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    def apply(self, tweets: list[Tweet]) -> list[Tweet]:
        return [t for t in tweets if t.retweet_count >= self._threshold]


class UniqueLinksStage:
    """Keep the first tweet per canonical link of its first URL.

    Tweets without URLs have no link key and are dropped.
    """

    name = "unique_links"

    def apply(self, tweets: list[Tweet]) -> list[Tweet]:
        seen: set[str] = set()
        unique: list[Tweet] = []
        for tweet in tweets:
            key = link_key(tweet)
            if key is None:
                logger.debug(f"Dropping tweet {tweet.tweet_id} without links")
                continue
            if key in seen:
                continue
            seen.add(key)
            unique.append(tweet)
        return unique


def default_stages(min_retweet_count: int) -> list[CurationStage]:
    """The standard curation sequence: rank, originality, threshold, uniqueness."""
    return [
        SortByRetweetsStage(),
        OriginalTweetsStage(),
        MinRetweetsStage(min_retweet_count),
        UniqueLinksStage(),
    ]
