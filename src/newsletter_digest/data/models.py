"""Core data models for the newsletter digest."""

import dataclasses
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

# Tweet ids are 64-bit decimal integers. Python's int is arbitrary precision,
# so ids are parsed from their decimal string form and never touch float.
TweetId = int

# Date format used by the search API for ``created_at``.
API_DATETIME_FORMAT = "%a %b %d %H:%M:%S %z %Y"


def parse_tweet_id(value: str | int) -> TweetId:
    """Parse a tweet id from the API's ``id_str`` (or an int).

    Raises:
        ValueError: If the value is not a non-negative decimal integer.
    """
    if isinstance(value, bool) or not isinstance(value, str | int):
        raise ValueError(f"Invalid tweet id: {value!r}")
    if isinstance(value, str):
        if not value.isdigit():
            raise ValueError(f"Invalid tweet id: {value!r}")
        return int(value)
    if value < 0:
        raise ValueError(f"Invalid tweet id: {value!r}")
    return value


def parse_created_at(value: str) -> datetime:
    """Parse a ``created_at`` timestamp into an aware datetime.

    Accepts the search API format (``Wed Oct 10 20:19:24 +0000 2018``) and
    ISO 8601. Naive ISO timestamps are taken as UTC.
    """
    try:
        return datetime.strptime(value, API_DATETIME_FORMAT)
    except ValueError:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed


class ResultType(StrEnum):
    """What type of search results the API should prefer."""

    RECENT = "recent"
    POPULAR = "popular"
    MIXED = "mixed"


class ContentFilter(StrEnum):
    """Additional content filter applied by the search API."""

    SAFE = "safe"
    MEDIA = "media"
    NATIVE_VIDEO = "native_video"
    PERISCOPE = "periscope"
    VINE = "vine"
    IMAGES = "images"
    TWIMG = "twimg"
    LINKS = "links"


@dataclass(frozen=True)
class SearchQuery:
    """One logical search against the tweet search API.

    ``until_date`` of None means unbounded; the API treats "today" the same way.
    ``max_id`` is only set on continuation requests.
    """

    terms: tuple[str, ...]
    lang: str = "en"
    result_type: ResultType = ResultType.RECENT
    count: int = 100
    since_date: date | None = None
    until_date: date | None = None
    content_filter: ContentFilter | None = None
    max_id: TweetId | None = None

    def __post_init__(self) -> None:
        if isinstance(self.terms, str) or not self.terms:
            raise ValueError("SearchQuery requires at least one search term")
        if any(not term.strip() for term in self.terms):
            raise ValueError("Search terms must not be blank")
        if not 1 <= self.count <= 100:
            raise ValueError(f"count must be between 1 and 100, got {self.count}")
        if self.max_id is not None and self.max_id < 0:
            raise ValueError(f"max_id must be non-negative, got {self.max_id}")

    def with_cursor(self, max_id: TweetId | None) -> "SearchQuery":
        """Return a copy of this query pointing at the given cursor."""
        return dataclasses.replace(self, max_id=max_id)


@dataclass(frozen=True)
class TweetUrl:
    """A URL entity attached to a tweet."""

    url: str
    expanded_url: str
    display_url: str


@dataclass(frozen=True)
class Tweet:
    """A tweet returned by the search API."""

    tweet_id: TweetId
    created_at: datetime
    text: str = ""
    urls: tuple[TweetUrl, ...] = ()
    retweet_count: int = 0
    in_reply_to_status_id: TweetId | None = None
    in_reply_to_screen_name: str | None = None
    is_quote_status: bool = False
    is_retweet: bool = False
    author_handle: str = ""
    author_name: str = ""

    @property
    def is_reply(self) -> bool:
        return self.in_reply_to_status_id is not None or bool(self.in_reply_to_screen_name)

    @property
    def is_quote(self) -> bool:
        return self.is_quote_status

    @property
    def is_repost(self) -> bool:
        return self.is_retweet

    @property
    def first_url(self) -> TweetUrl | None:
        return self.urls[0] if self.urls else None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Tweet":
        """Build a Tweet from a search API status object.

        Raises:
            ValueError: If the id or ``created_at`` is missing or malformed.
        """
        raw_id = data.get("id_str") or data.get("id")
        if raw_id is None:
            raise ValueError("Tweet is missing an id")
        created_at = data.get("created_at")
        if not created_at:
            raise ValueError(f"Tweet {raw_id} is missing created_at")

        entities = data.get("entities") or {}
        urls = tuple(
            TweetUrl(
                url=u.get("url", ""),
                expanded_url=u.get("expanded_url") or u.get("url", ""),
                display_url=u.get("display_url") or u.get("url", ""),
            )
            for u in entities.get("urls") or []
        )

        reply_id = data.get("in_reply_to_status_id_str", data.get("in_reply_to_status_id"))
        user = data.get("user") or {}

        return cls(
            tweet_id=parse_tweet_id(raw_id),
            created_at=parse_created_at(created_at),
            text=data.get("full_text") or data.get("text", ""),
            urls=urls,
            retweet_count=int(data.get("retweet_count") or 0),
            in_reply_to_status_id=parse_tweet_id(reply_id) if reply_id is not None else None,
            in_reply_to_screen_name=data.get("in_reply_to_screen_name"),
            is_quote_status=bool(data.get("is_quote_status", False)),
            is_retweet=data.get("retweeted_status") is not None,
            author_handle=user.get("screen_name", ""),
            author_name=user.get("name", ""),
        )

    def to_api(self) -> dict[str, Any]:
        """Serialize to the API-shaped subset that ``from_api`` reads back."""
        data: dict[str, Any] = {
            "id_str": str(self.tweet_id),
            "created_at": self.created_at.astimezone(UTC).strftime(API_DATETIME_FORMAT),
            "text": self.text,
            "entities": {
                "urls": [
                    {
                        "url": u.url,
                        "expanded_url": u.expanded_url,
                        "display_url": u.display_url,
                    }
                    for u in self.urls
                ]
            },
            "retweet_count": self.retweet_count,
            "in_reply_to_status_id_str": (
                str(self.in_reply_to_status_id)
                if self.in_reply_to_status_id is not None
                else None
            ),
            "in_reply_to_screen_name": self.in_reply_to_screen_name,
            "is_quote_status": self.is_quote_status,
            "user": {"screen_name": self.author_handle, "name": self.author_name},
        }
        if self.is_retweet:
            data["retweeted_status"] = {}
        return data


@dataclass(frozen=True)
class PageResult:
    """One search API response page. Tweets are newest-first."""

    tweets: tuple[Tweet, ...] = ()
    search_metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StageCount:
    """Tweet counts before and after one curation stage."""

    stage: str
    count_in: int
    count_out: int


@dataclass(frozen=True)
class CurationResult:
    """Output of a curation pipeline run."""

    tweets: list[Tweet]
    stage_counts: list[StageCount] = field(default_factory=list)


@dataclass(frozen=True)
class DigestResult:
    """Output of one digest run: curated tweets and their two groupings."""

    raw_count: int
    tweets: list[Tweet]
    stage_counts: list[StageCount]
    days: dict[date, list[Tweet]]
    reviewers: dict[str, list[Tweet]]
