"""Query filters applied to the loaded item set before a digest is built."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from triage.feedback.models import FeedbackItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedbackFilter:
    """Sentiment/theme predicate.

    ``sentiment`` is compared case-insensitively and stored lower-cased;
    ``theme`` must match exactly.
    """

    sentiment: Optional[str] = None
    theme: Optional[str] = None

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> FeedbackFilter:
        """Build from request query parameters. Empty values mean no filter."""
        sentiment = (query.get("sentiment") or "").strip().lower() or None
        theme = query.get("theme") or None
        return cls(sentiment=sentiment, theme=theme)

    @property
    def active(self) -> bool:
        return bool(self.sentiment or self.theme)

    def as_params(self) -> dict[str, str]:
        """Active filters as query parameters, sentiment first."""
        params: dict[str, str] = {}
        if self.sentiment:
            params["sentiment"] = self.sentiment
        if self.theme:
            params["theme"] = self.theme
        return params

    def matches(self, item: FeedbackItem) -> bool:
        if self.sentiment and item.sentiment.lower() != self.sentiment:
            return False
        if self.theme and item.theme != self.theme:
            return False
        return True

    def apply(self, items: Sequence[FeedbackItem]) -> list[FeedbackItem]:
        """Return matching items in their original order."""
        if not self.active:
            return list(items)
        result = [item for item in items if self.matches(item)]
        logger.info("FeedbackFilter %s: %d → %d items", self.as_params(), len(items), len(result))
        return result
