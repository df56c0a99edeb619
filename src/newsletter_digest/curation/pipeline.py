"""Ordered curation pipeline."""

import logging
import time

from newsletter_digest.curation.base import CurationStage
from newsletter_digest.data import CurationResult, StageCount, Tweet
from newsletter_digest.run_logger import RunLogger

logger = logging.getLogger(__name__)


class CurationPipeline:
    """Apply curation stages in order, each to the previous stage's output.

    Stage counts are logged and returned; stages have no other side effects.

    Args:
        stages: Stages to run, in order.
        run_logger: Optional RunLogger recording one stage record per stage.
    """

    def __init__(
        self,
        stages: list[CurationStage],
        run_logger: RunLogger | None = None,
    ) -> None:
        self._stages = list(stages)
        self._run_logger = run_logger

    @property
    def stages(self) -> list[CurationStage]:
        return list(self._stages)

    def run(self, tweets: list[Tweet]) -> CurationResult:
        """Curate ``tweets``; the input list is left untouched.

        Args:
            tweets: Raw tweets in source order.

        Returns:
            CurationResult with the curated tweets and per-stage counts.
        """
        logger.info(f"Tweets before filtering: {len(tweets)}")

        current = list(tweets)
        counts: list[StageCount] = []
        for stage in self._stages:
            t0 = time.monotonic()
            output = stage.apply(current)
            duration = time.monotonic() - t0

            counts.append(StageCount(stage=stage.name, count_in=len(current), count_out=len(output)))
            logger.info(f"Tweets after the {stage.name} filter: {len(output)}")

            if self._run_logger:
                self._run_logger.log_stage(
                    stage=stage.name,
                    component=type(stage).__name__,
                    input_data={"tweet_count": len(current)},
                    output_data={"tweet_count": len(output)},
                    duration_seconds=duration,
                )
            current = output

        return CurationResult(tweets=current, stage_counts=counts)
