"""Aggregation: sentiment breakdown, ranked themes and the needs-attention shortlist."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from triage.feedback.models import SENTIMENTS, FeedbackItem

logger = logging.getLogger(__name__)

TOP_THEMES_LIMIT = 5
ATTENTION_THRESHOLD = 70
ATTENTION_LIMIT = 5


@dataclass(frozen=True)
class ThemeCount:
    theme: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"theme": self.theme, "count": self.count}


@dataclass(frozen=True)
class AggregateStats:
    """Output of :meth:`Aggregator.aggregate`."""

    sentiment_breakdown: dict[str, int]
    top_themes: tuple[ThemeCount, ...] = field(default_factory=tuple)
    needs_attention: tuple[FeedbackItem, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return sum(self.sentiment_breakdown.values())


class Aggregator:
    """Count sentiments and themes and pick the items that need attention."""

    def aggregate(self, items: Sequence[FeedbackItem]) -> AggregateStats:
        stats = AggregateStats(
            sentiment_breakdown=self.sentiment_breakdown(items),
            top_themes=tuple(self.top_themes(items)),
            needs_attention=tuple(self.needs_attention(items)),
        )
        logger.debug(
            "Aggregator: %d items, %d themes, %d need attention",
            len(items),
            len(stats.top_themes),
            len(stats.needs_attention),
        )
        return stats

    @staticmethod
    def sentiment_breakdown(items: Sequence[FeedbackItem]) -> dict[str, int]:
        counts = {s: 0 for s in SENTIMENTS}
        for item in items:
            counts[item.sentiment] += 1
        return counts

    def top_themes(self, items: Sequence[FeedbackItem]) -> list[ThemeCount]:
        """Themes present in ``items``, most frequent first.

        Dict insertion order records first appearance, and ``sorted`` is
        stable, so equal counts keep that order.
        """
        counts: dict[str, int] = {}
        for item in items:
            counts[item.theme] = counts.get(item.theme, 0) + 1
        ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
        return [ThemeCount(theme, count) for theme, count in ranked[:TOP_THEMES_LIMIT]]

    def needs_attention(self, items: Sequence[FeedbackItem]) -> list[FeedbackItem]:
        """Highest-priority items at or above the threshold, stable on ties."""
        urgent = [item for item in items if item.priority_score >= ATTENTION_THRESHOLD]
        urgent.sort(key=lambda item: item.priority_score, reverse=True)
        return urgent[:ATTENTION_LIMIT]
