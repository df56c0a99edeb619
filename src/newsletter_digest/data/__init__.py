"""Data models for the newsletter digest."""

from newsletter_digest.data.models import (
    API_DATETIME_FORMAT,
    ContentFilter,
    CurationResult,
    DigestResult,
    PageResult,
    ResultType,
    SearchQuery,
    StageCount,
    Tweet,
    TweetId,
    TweetUrl,
    parse_created_at,
    parse_tweet_id,
)

__all__ = [
    "API_DATETIME_FORMAT",
    "ContentFilter",
    "CurationResult",
    "DigestResult",
    "PageResult",
    "ResultType",
    "SearchQuery",
    "StageCount",
    "Tweet",
    "TweetId",
    "TweetUrl",
    "parse_created_at",
    "parse_tweet_id",
]
