"""URL handling utilities."""

from newsletter_digest.data import Tweet


def canonical_url(url: str) -> str:
    """Normalize a URL for duplicate detection.

    Comparison is case-insensitive and ignores a single trailing slash, so
    ``http://X.com/a/`` and ``http://x.com/a`` share a key.
    """
    key = url.strip().lower()
    if key.endswith("/"):
        key = key[:-1]
    return key


def link_key(tweet: Tweet) -> str | None:
    """Canonical key of a tweet's first URL, or None if it has no URLs."""
    first = tweet.first_url
    if first is None:
        return None
    return canonical_url(first.expanded_url)
