"""Twitter search using the v1.1 standard search API with application-only auth."""

import base64
import logging
import os
from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx

from newsletter_digest.data import PageResult, SearchQuery, Tweet, TweetId
from newsletter_digest.exceptions import (
    AuthError,
    NotAuthenticated,
    SearchError,
    UnsupportedAuthMode,
)

BASE_API_URL = "https://api.twitter.com/"
AUTH_ENDPOINT = "oauth2/token"
SEARCH_ENDPOINT = "1.1/search/tweets.json"

# Date format required by the search API
DATE_FORMAT = "%Y-%m-%d"

# Larger than any tweet id; used as the starting minimum of the first page.
ID_SENTINEL: TweetId = 10**100

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """An authenticated application-only session.

    Written once by ``TwitterClient.authenticate`` and only read afterwards,
    so a single session can be shared by concurrent searches.
    """

    access_token: str
    token_type: str = "bearer"

    @property
    def authorization(self) -> str:
        return f"Bearer {self.access_token}"


class TwitterClient:
    """Access to the Twitter standard search API.

    Performs a backward cursor walk over ``max_id`` so that a single call to
    ``search`` returns every page the API has for the query. Pages are fetched
    strictly one after another since each cursor depends on the previous page.

    Args:
        base_url: API root (overridable for tests and proxies).
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, *, base_url: str = BASE_API_URL, timeout: float = 30.0) -> None:
        self._base_url = base_url
        self._timeout = timeout

    async def authenticate(
        self,
        consumer_key: str,
        consumer_secret: str,
        *,
        app_only: bool = True,
    ) -> Session:
        """Exchange consumer credentials for a bearer token.

        Args:
            consumer_key: Application consumer key.
            consumer_secret: Application consumer secret.
            app_only: Only application-only auth is supported.

        Returns:
            The authenticated session.

        Raises:
            UnsupportedAuthMode: If ``app_only`` is False.
            AuthError: If the credentials are rejected or the response is invalid.
        """
        if not app_only:
            raise UnsupportedAuthMode("Only application-only authentication is supported.")

        credentials = base64.b64encode(f"{consumer_key}:{consumer_secret}".encode()).decode()
        headers = {
            "Authorization": f"Basic {credentials}",
            "Content-Type": "application/x-www-form-urlencoded;charset=UTF-8",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._base_url + AUTH_ENDPOINT,
                    headers=headers,
                    content="grant_type=client_credentials",
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise AuthError(f"Authentication failed: {e}") from e

        if not isinstance(data, dict) or not data.get("access_token"):
            raise AuthError("Authentication response did not contain an access token.")
        token_type = str(data.get("token_type", "")).lower()
        if token_type != "bearer":
            raise AuthError(f"Unexpected token type: {data.get('token_type')!r}")

        logger.info("Authenticated with application-only auth")
        return Session(access_token=data["access_token"], token_type=token_type)

    async def search(self, session: Session | None, query: SearchQuery) -> list[Tweet]:
        """Run the query across all result pages.

        Pages are concatenated in reverse fetch order: the oldest page comes
        first, the first (newest) page last. Within a page the API order is kept.
        Use ``search_pages`` for fetch order.

        Raises:
            NotAuthenticated: If no authenticated session is given.
            SearchError: If any page fails; partial results are discarded.
        """
        pages = await self.search_pages(session, query)
        tweets: list[Tweet] = []
        for page in reversed(pages):
            tweets.extend(page.tweets)
        return tweets

    async def search_pages(self, session: Session | None, query: SearchQuery) -> list[PageResult]:
        """Walk the ``max_id`` cursor backwards and return pages in fetch order.

        The walk stops at the first page whose minimum id does not fall below
        the cursor it was requested with (an empty or exhausted page).
        """
        if session is None or not session.access_token:
            raise NotAuthenticated("Please authenticate first using authenticate().")

        pages: list[PageResult] = []
        cursor = query.max_id
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            while True:
                page = await self._fetch_page(client, session, query.with_cursor(cursor))
                pages.append(page)
                logger.info(f"Searching with max_id {cursor}... Got tweets: {len(page.tweets)}")

                previous_min = cursor if cursor is not None else ID_SENTINEL
                current_min = _min_id(page.tweets, previous_min)
                if current_min == previous_min:
                    break
                # Strictly older than everything seen so far
                cursor = current_min - 1

        logger.info(f"Search finished after {len(pages)} page(s)")
        return pages

    async def _fetch_page(
        self,
        client: httpx.AsyncClient,
        session: Session,
        query: SearchQuery,
    ) -> PageResult:
        """Fetch and decode one search page."""
        headers = {"Authorization": session.authorization}
        try:
            response = await client.get(
                self._base_url + SEARCH_ENDPOINT,
                params=build_search_params(query),
                headers=headers,
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise SearchError(f"Search request failed: {e}", max_id=query.max_id) from e

        if not isinstance(data, dict) or not isinstance(data.get("statuses"), list):
            raise SearchError("Search response has no statuses list", max_id=query.max_id)

        try:
            tweets = tuple(Tweet.from_api(status) for status in data["statuses"])
        except (ValueError, TypeError, AttributeError) as e:
            raise SearchError(f"Malformed status in search response: {e}", max_id=query.max_id) from e

        return PageResult(tweets=tweets, search_metadata=data.get("search_metadata") or {})


def build_search_query_text(terms: tuple[str, ...] | list[str]) -> str:
    """Combine search terms with OR, quoting multi-word terms."""
    parts = [f'"{term}"' if len(term.split()) > 1 else term for term in terms]
    return " OR ".join(parts)


def build_search_params(query: SearchQuery, *, today: date | None = None) -> dict[str, Any]:
    """Build the search request parameters for a query.

    ``until`` is sent as an empty string when unbounded or equal to today.
    ``filter`` and ``max_id`` are only included when set.
    """
    today = today or date.today()
    until = query.until_date
    until_str = "" if until is None or until == today else until.strftime(DATE_FORMAT)
    since_str = query.since_date.strftime(DATE_FORMAT) if query.since_date else ""

    params: dict[str, Any] = {
        "q": build_search_query_text(query.terms),
        "lang": query.lang,
        "result_type": query.result_type.value,
        "count": query.count,
        "until": until_str,
        "since": since_str,
    }
    if query.content_filter is not None:
        params["filter"] = query.content_filter.value
    if query.max_id is not None:
        params["max_id"] = str(query.max_id)
    return params


def _min_id(tweets: tuple[Tweet, ...], initial_min: TweetId) -> TweetId:
    """Smallest tweet id on the page, starting from ``initial_min``."""
    min_id = initial_min
    for tweet in tweets:
        if tweet.tweet_id < min_id:
            min_id = tweet.tweet_id
    return min_id


def read_credentials(
    consumer_key: str | None = None,
    consumer_secret: str | None = None,
) -> tuple[str, str]:
    """Resolve consumer credentials, falling back to environment variables.

    Reads ``TWITTER_CONSUMER_KEY`` and ``TWITTER_CONSUMER_SECRET``. Surrounding
    single quotes (as left by some shells and npm-style scripts) are stripped.

    Raises:
        ValueError: If either credential is missing.
    """
    key = (consumer_key or os.environ.get("TWITTER_CONSUMER_KEY", "")).replace("'", "")
    secret = (consumer_secret or os.environ.get("TWITTER_CONSUMER_SECRET", "")).replace("'", "")
    if not key or not secret:
        raise ValueError(
            "Twitter consumer key and secret required. "
            "Pass them or set TWITTER_CONSUMER_KEY and TWITTER_CONSUMER_SECRET env vars."
        )
    return key, secret


class TwitterSearchSource:
    """Tweet source backed by a live search: authenticate, then search.

    Args:
        query: The search to run.
        client: Client to use (a default TwitterClient if omitted).
        consumer_key: Consumer key (defaults to TWITTER_CONSUMER_KEY env var).
        consumer_secret: Consumer secret (defaults to TWITTER_CONSUMER_SECRET env var).
    """

    def __init__(
        self,
        query: SearchQuery,
        *,
        client: TwitterClient | None = None,
        consumer_key: str | None = None,
        consumer_secret: str | None = None,
    ) -> None:
        self._query = query
        self._client = client or TwitterClient()
        self._key, self._secret = read_credentials(consumer_key, consumer_secret)

    @property
    def query(self) -> SearchQuery:
        return self._query

    async def fetch_tweets(self) -> list[Tweet]:
        """Authenticate and return every tweet matching the query."""
        session = await self._client.authenticate(self._key, self._secret)
        tweets = await self._client.search(session, self._query)
        logger.info(f"Total tweets found: {len(tweets)}")
        return tweets
