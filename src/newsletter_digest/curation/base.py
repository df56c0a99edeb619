"""Protocol for curation stages."""

from typing import Protocol

from newsletter_digest.data import Tweet


class CurationStage(Protocol):
    """A pure transform from one ordered tweet list to another."""

    @property
    def name(self) -> str:
        """Short stage name used in logs and stage counts."""
        ...

    def apply(self, tweets: list[Tweet]) -> list[Tweet]:
        """Return a new list; the input list is never mutated.

        Args:
            tweets: Output of the previous stage.

        Returns:
            The stage output, in order.
        """
        ...
