"""Tests for TwitterClient authentication and cursor pagination."""

import base64
from datetime import date
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from newsletter_digest.data import ContentFilter, ResultType, SearchQuery, Tweet
from newsletter_digest.exceptions import (
    AuthError,
    NotAuthenticated,
    SearchError,
    UnsupportedAuthMode,
)
from newsletter_digest.search.twitter import (
    Session,
    TwitterClient,
    TwitterSearchSource,
    build_search_params,
    build_search_query_text,
    read_credentials,
)


def _status(tweet_id: int | str) -> dict[str, Any]:
    return {
        "id_str": str(tweet_id),
        "created_at": "Mon Oct 12 09:00:00 +0000 2026",
        "text": f"tweet {tweet_id}",
        "entities": {"urls": []},
        "retweet_count": 0,
    }


def _make_mock_response(data: Any) -> MagicMock:
    response = MagicMock()
    response.json.return_value = data
    response.raise_for_status = MagicMock()
    return response


def _page(*ids: int | str) -> dict[str, Any]:
    return {"statuses": [_status(i) for i in ids], "search_metadata": {"count": 100}}


def _patch_pages(monkeypatch: pytest.MonkeyPatch, pages: list[dict[str, Any]]) -> list[dict]:
    """Serve ``pages`` in order from AsyncClient.get; return the captured params."""
    captured: list[dict] = []
    responses = iter(pages)

    async def mock_get(self: Any, url: str, **kwargs: Any) -> MagicMock:
        captured.append(dict(kwargs.get("params", {})))
        return _make_mock_response(next(responses))

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)
    return captured


@pytest.fixture
def client() -> TwitterClient:
    return TwitterClient()


@pytest.fixture
def session() -> Session:
    return Session(access_token="test-token")


@pytest.fixture
def query() -> SearchQuery:
    return SearchQuery(terms=("SharePoint",), count=100)


def _ids(tweets: list[Tweet]) -> list[int]:
    return [t.tweet_id for t in tweets]


# -- authenticate --


async def test_authenticate_returns_session(
    client: TwitterClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    captured: dict[str, Any] = {}

    async def mock_post(self: Any, url: str, **kwargs: Any) -> MagicMock:
        captured["url"] = url
        captured.update(kwargs)
        return _make_mock_response({"token_type": "bearer", "access_token": "AAAA"})

    monkeypatch.setattr(httpx.AsyncClient, "post", mock_post)

    session = await client.authenticate("key", "secret")

    assert session.access_token == "AAAA"
    assert session.authorization == "Bearer AAAA"
    assert captured["url"] == "https://api.twitter.com/oauth2/token"
    expected = base64.b64encode(b"key:secret").decode()
    assert captured["headers"]["Authorization"] == f"Basic {expected}"
    assert captured["content"] == "grant_type=client_credentials"


async def test_authenticate_rejected_credentials(
    client: TwitterClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    response = _make_mock_response({})
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "403 Forbidden", request=MagicMock(), response=MagicMock()
    )

    async def mock_post(self: Any, url: str, **kwargs: Any) -> MagicMock:
        return response

    monkeypatch.setattr(httpx.AsyncClient, "post", mock_post)

    with pytest.raises(AuthError, match="Authentication failed"):
        await client.authenticate("key", "bad-secret")


async def test_authenticate_transport_error(
    client: TwitterClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def mock_post(self: Any, url: str, **kwargs: Any) -> MagicMock:
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(httpx.AsyncClient, "post", mock_post)

    with pytest.raises(AuthError):
        await client.authenticate("key", "secret")


async def test_authenticate_rejects_non_bearer_token(
    client: TwitterClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def mock_post(self: Any, url: str, **kwargs: Any) -> MagicMock:
        return _make_mock_response({"token_type": "mac", "access_token": "AAAA"})

    monkeypatch.setattr(httpx.AsyncClient, "post", mock_post)

    with pytest.raises(AuthError, match="token type"):
        await client.authenticate("key", "secret")


async def test_authenticate_requires_access_token(
    client: TwitterClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def mock_post(self: Any, url: str, **kwargs: Any) -> MagicMock:
        return _make_mock_response({"token_type": "bearer"})

    monkeypatch.setattr(httpx.AsyncClient, "post", mock_post)

    with pytest.raises(AuthError, match="access token"):
        await client.authenticate("key", "secret")


async def test_authenticate_only_supports_app_only(client: TwitterClient) -> None:
    with pytest.raises(UnsupportedAuthMode):
        await client.authenticate("key", "secret", app_only=False)


# -- search preconditions --


async def test_search_requires_session(client: TwitterClient, query: SearchQuery) -> None:
    with pytest.raises(NotAuthenticated):
        await client.search(None, query)


async def test_search_requires_token(client: TwitterClient, query: SearchQuery) -> None:
    with pytest.raises(NotAuthenticated):
        await client.search(Session(access_token=""), query)


# -- pagination --


async def test_single_page_then_empty_page(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Page [50, 30, 80] moves the cursor to 29; the empty page ends the walk."""
    captured = _patch_pages(monkeypatch, [_page(50, 30, 80), _page()])

    tweets = await client.search(session, query)

    assert _ids(tweets) == [50, 30, 80]
    assert len(captured) == 2
    assert "max_id" not in captured[0]
    assert captured[1]["max_id"] == "29"


async def test_empty_first_page_makes_one_request(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured = _patch_pages(monkeypatch, [_page()])

    tweets = await client.search(session, query)

    assert tweets == []
    assert len(captured) == 1


async def test_pages_are_concatenated_in_reverse_fetch_order(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured = _patch_pages(monkeypatch, [_page(100, 90), _page(80, 70), _page()])

    tweets = await client.search(session, query)

    assert _ids(tweets) == [80, 70, 100, 90]
    assert [p.get("max_id") for p in captured] == [None, "89", "69"]


async def test_search_pages_returns_fetch_order(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_pages(monkeypatch, [_page(100, 90), _page(80, 70), _page()])

    pages = await client.search_pages(session, query)

    assert [[t.tweet_id for t in p.tweets] for p in pages] == [[100, 90], [80, 70], []]
    assert pages[0].search_metadata == {"count": 100}


async def test_cursors_strictly_decrease(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    captured = _patch_pages(
        monkeypatch,
        [_page(500, 450), _page(449, 300), _page(120, 299), _page(5), _page()],
    )

    await client.search(session, query)

    cursors = [int(p["max_id"]) for p in captured if "max_id" in p]
    assert cursors == [449, 299, 119, 4]
    assert all(a > b for a, b in zip(cursors, cursors[1:]))


async def test_page_not_below_cursor_ends_walk(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """max_id is inclusive: a page holding only the cursor id is the last one."""
    captured = _patch_pages(monkeypatch, [_page(100, 90), _page(89)])

    tweets = await client.search(session, query)

    assert len(captured) == 2
    assert _ids(tweets) == [89, 100, 90]


async def test_large_ids_keep_precision(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    big = "1050118621198921728"
    bigger = "18446744073709551617"  # 2**64 + 1
    captured = _patch_pages(monkeypatch, [_page(bigger, big), _page()])

    tweets = await client.search(session, query)

    assert captured[1]["max_id"] == "1050118621198921727"
    assert _ids(tweets) == [18446744073709551617, 1050118621198921728]


async def test_search_sends_bearer_token(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    headers: list[dict] = []

    async def mock_get(self: Any, url: str, **kwargs: Any) -> MagicMock:
        headers.append(kwargs["headers"])
        return _make_mock_response(_page())

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

    await client.search(session, query)

    assert headers == [{"Authorization": "Bearer test-token"}]


async def test_failure_mid_walk_discards_results(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    call_count = 0

    async def mock_get(self: Any, url: str, **kwargs: Any) -> MagicMock:
        nonlocal call_count
        call_count += 1
        if call_count == 2:
            raise httpx.HTTPError("API error")
        return _make_mock_response(_page(100, 90))

    monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)

    with pytest.raises(SearchError) as exc_info:
        await client.search(session, query)

    assert exc_info.value.max_id == 89
    assert isinstance(exc_info.value.__cause__, httpx.HTTPError)
    assert call_count == 2


async def test_malformed_response_raises_search_error(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_pages(monkeypatch, [{"errors": [{"code": 215}]}])

    with pytest.raises(SearchError, match="no statuses"):
        await client.search(session, query)


async def test_malformed_status_raises_search_error(
    client: TwitterClient,
    session: Session,
    query: SearchQuery,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _patch_pages(monkeypatch, [{"statuses": [{"id_str": "abc", "created_at": "x"}]}])

    with pytest.raises(SearchError, match="Malformed status"):
        await client.search(session, query)


# -- request parameters --


def test_query_text_joins_with_or_and_quotes_phrases() -> None:
    text = build_search_query_text(("SharePoint", "Office365", "SPFX", "Office 365"))
    assert text == 'SharePoint OR Office365 OR SPFX OR "Office 365"'


def test_query_text_quotes_leading_phrase() -> None:
    assert build_search_query_text(("Office 365", "SPFX")) == '"Office 365" OR SPFX'


def test_search_params_full() -> None:
    query = SearchQuery(
        terms=("SharePoint",),
        lang="en",
        result_type=ResultType.POPULAR,
        count=50,
        since_date=date(2026, 10, 13),
        until_date=date(2026, 10, 18),
        content_filter=ContentFilter.LINKS,
        max_id=12345,
    )
    params = build_search_params(query, today=date(2026, 10, 19))
    assert params == {
        "q": "SharePoint",
        "lang": "en",
        "result_type": "popular",
        "count": 50,
        "until": "2026-10-18",
        "since": "2026-10-13",
        "filter": "links",
        "max_id": "12345",
    }


def test_search_params_until_today_is_unbounded() -> None:
    query = SearchQuery(terms=("x",), until_date=date(2026, 10, 19))
    params = build_search_params(query, today=date(2026, 10, 19))
    assert params["until"] == ""
    assert params["since"] == ""


def test_search_params_omit_optional_fields() -> None:
    params = build_search_params(SearchQuery(terms=("x",)))
    assert "filter" not in params
    assert "max_id" not in params
    assert params["until"] == ""


# -- credentials and source --


def test_read_credentials_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TWITTER_CONSUMER_KEY", "'env-key'")
    monkeypatch.setenv("TWITTER_CONSUMER_SECRET", "env-secret")
    assert read_credentials() == ("env-key", "env-secret")


def test_read_credentials_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TWITTER_CONSUMER_KEY", raising=False)
    monkeypatch.delenv("TWITTER_CONSUMER_SECRET", raising=False)
    with pytest.raises(ValueError, match="consumer key and secret required"):
        read_credentials()


async def test_search_source_authenticates_then_searches(query: SearchQuery) -> None:
    session = Session(access_token="AAAA")
    tweet = Tweet.from_api(_status(42))
    mock_client = MagicMock()
    mock_client.authenticate = AsyncMock(return_value=session)
    mock_client.search = AsyncMock(return_value=[tweet])

    source = TwitterSearchSource(
        query, client=mock_client, consumer_key="key", consumer_secret="secret"
    )
    tweets = await source.fetch_tweets()

    assert tweets == [tweet]
    mock_client.authenticate.assert_awaited_once_with("key", "secret")
    mock_client.search.assert_awaited_once_with(session, query)


async def test_search_source_propagates_auth_error(query: SearchQuery) -> None:
    mock_client = MagicMock()
    mock_client.authenticate = AsyncMock(side_effect=AuthError("rejected"))
    mock_client.search = AsyncMock()

    source = TwitterSearchSource(
        query, client=mock_client, consumer_key="key", consumer_secret="secret"
    )
    with pytest.raises(AuthError):
        await source.fetch_tweets()
    mock_client.search.assert_not_awaited()
