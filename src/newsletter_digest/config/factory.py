"""Factory functions to create components from configuration."""

from datetime import date, timedelta
from pathlib import Path

from newsletter_digest.config.models import (
    CurationConfig,
    DigestConfig,
    SearchConfig,
)
from newsletter_digest.curation import CurationPipeline, default_stages
from newsletter_digest.data import SearchQuery
from newsletter_digest.pipeline.digest import DigestPipeline
from newsletter_digest.run_logger import RunLogger
from newsletter_digest.search.base import TweetSource
from newsletter_digest.search.cache import CachedTweetSource
from newsletter_digest.search.twitter import TwitterClient, TwitterSearchSource


def build_query(config: SearchConfig, *, today: date | None = None) -> SearchQuery:
    """Create the search query for a run, resolving day offsets against today."""
    today = today or date.today()
    until_date = today - timedelta(days=config.until_days) if config.until_days else None
    return SearchQuery(
        terms=tuple(config.terms),
        lang=config.lang,
        result_type=config.result_type,
        count=config.count,
        since_date=today - timedelta(days=config.since_days),
        until_date=until_date,
        content_filter=config.filter,
    )


def create_source(
    config: DigestConfig,
    *,
    use_cache: bool | None = None,
    consumer_key: str | None = None,
    consumer_secret: str | None = None,
    client: TwitterClient | None = None,
    today: date | None = None,
) -> TweetSource:
    """Create the tweet source: cached files or a live search.

    Raises:
        ValueError: For a live search without credentials.
    """
    cached = use_cache if use_cache is not None else config.storage.use_cache
    if cached:
        return CachedTweetSource(config.storage.data_path)
    return TwitterSearchSource(
        build_query(config.search, today=today),
        client=client,
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
    )


def create_curation(
    config: CurationConfig,
    run_logger: RunLogger | None = None,
) -> CurationPipeline:
    """Create the standard curation pipeline."""
    return CurationPipeline(default_stages(config.min_retweet_count), run_logger=run_logger)


def create_from_config(
    config: DigestConfig,
    *,
    use_cache: bool | None = None,
    consumer_key: str | None = None,
    consumer_secret: str | None = None,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[DigestPipeline, RunLogger | None]:
    """Create a complete digest pipeline from root config.

    Args:
        config: Root configuration.
        use_cache: Override the config's storage.use_cache setting.
        consumer_key: Consumer key (defaults to env var for live searches).
        consumer_secret: Consumer secret (defaults to env var for live searches).
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (pipeline, run_logger). run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    source = create_source(
        config,
        use_cache=use_cache,
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
    )
    run_params: dict[str, object] = {"min_retweet_count": config.curation.min_retweet_count}
    if isinstance(source, TwitterSearchSource):
        run_params["query"] = source.query

    pipeline = DigestPipeline(
        source=source,
        curation=create_curation(config.curation, run_logger=run_logger),
        reviewers=config.reviewers,
        run_logger=run_logger,
        run_params=run_params,
    )
    return (pipeline, run_logger)
