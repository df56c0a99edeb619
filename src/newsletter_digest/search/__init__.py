from newsletter_digest.search.base import TweetSource
from newsletter_digest.search.cache import CachedTweetSource
from newsletter_digest.search.twitter import Session, TwitterClient, TwitterSearchSource

__all__ = [
    "CachedTweetSource",
    "Session",
    "TweetSource",
    "TwitterClient",
    "TwitterSearchSource",
]
