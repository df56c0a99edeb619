"""Curation stages and pipeline."""

from newsletter_digest.curation.base import CurationStage
from newsletter_digest.curation.pipeline import CurationPipeline
from newsletter_digest.curation.stages import (
    MinRetweetsStage,
    OriginalTweetsStage,
    SortByRetweetsStage,
    UniqueLinksStage,
    default_stages,
    sort_by_retweets,
)

__all__ = [
    "CurationPipeline",
    "CurationStage",
    "MinRetweetsStage",
    "OriginalTweetsStage",
    "SortByRetweetsStage",
    "UniqueLinksStage",
    "default_stages",
    "sort_by_retweets",
]
