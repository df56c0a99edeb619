"""Digest pipeline: fetch, curate and group the tweets of one newsletter run."""

import logging
import time
from typing import Any

from newsletter_digest.curation import CurationPipeline
from newsletter_digest.data import DigestResult
from newsletter_digest.grouping import distribute_to_reviewers, group_by_day
from newsletter_digest.run_logger import RunLogger
from newsletter_digest.search.base import TweetSource

logger = logging.getLogger(__name__)


class DigestPipeline:
    """Pipeline from a tweet source to the day and reviewer groupings.

    Flow:
    1. The source produces the raw tweets (live search or cached files)
    2. The curation pipeline ranks, filters and deduplicates them
    3. Curated tweets are grouped by day and dealt out to reviewers

    Any error aborts the run; nothing is grouped for a failed run.

    Args:
        source: Where raw tweets come from.
        curation: Curation pipeline to apply.
        reviewers: Reviewer names, in dealing order.
        run_logger: Optional RunLogger for intermediate result logging.
        run_params: Extra parameters recorded with the run log.
    """

    def __init__(
        self,
        source: TweetSource,
        curation: CurationPipeline,
        reviewers: list[str],
        run_logger: RunLogger | None = None,
        run_params: dict[str, Any] | None = None,
    ) -> None:
        if not reviewers:
            raise ValueError("At least one reviewer is required")
        self._source = source
        self._curation = curation
        self._reviewers = list(reviewers)
        self._run_logger = run_logger
        self._run_params = run_params or {}

    async def run(self) -> DigestResult:
        """Execute the digest pipeline.

        Returns:
            DigestResult with the curated tweets and both groupings.
        """
        if self._run_logger:
            self._run_logger.start_run(
                type(self._source).__name__,
                {"reviewers": self._reviewers, **self._run_params},
            )

        # Step 1: Fetch raw tweets
        t0 = time.monotonic()
        raw_tweets = await self._source.fetch_tweets()
        fetch_duration = time.monotonic() - t0

        if self._run_logger:
            self._run_logger.log_stage(
                stage="fetch",
                component=type(self._source).__name__,
                input_data=None,
                output_data={"tweet_count": len(raw_tweets)},
                duration_seconds=fetch_duration,
            )

        # Step 2: Curate
        curated = self._curation.run(raw_tweets)

        # Step 3: Group by day and by reviewer
        t0 = time.monotonic()
        days = group_by_day(curated.tweets)
        reviewers = distribute_to_reviewers(curated.tweets, self._reviewers)
        grouping_duration = time.monotonic() - t0

        for day, bucket in days.items():
            logger.info(f"{day.isoformat()} : {len(bucket)}")

        if self._run_logger:
            self._run_logger.log_stage(
                stage="grouping",
                component="group_by_day+distribute_to_reviewers",
                input_data={"tweet_count": len(curated.tweets)},
                output_data={
                    "days": {day.isoformat(): len(b) for day, b in days.items()},
                    "reviewers": {name: len(b) for name, b in reviewers.items()},
                },
                duration_seconds=grouping_duration,
            )
            self._run_logger.finish_run(curated.tweets)

        return DigestResult(
            raw_count=len(raw_tweets),
            tweets=curated.tweets,
            stage_counts=curated.stage_counts,
            days=days,
            reviewers=reviewers,
        )
