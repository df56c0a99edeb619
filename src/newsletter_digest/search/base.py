from typing import Protocol

from newsletter_digest.data import Tweet


class TweetSource(Protocol):
    """Interface for anything that produces the raw tweets of a digest run."""

    async def fetch_tweets(self) -> list[Tweet]:
        """Return the raw, uncurated tweets.

        Returns:
            Tweets in source order. Callers must not rely on any ranking.
        """
        ...
