"""Priority scoring: additive weights over sentiment, urgency and theme."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Sequence

import numpy as np

if TYPE_CHECKING:
    from triage.feedback.models import FeedbackItem

logger = logging.getLogger(__name__)

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

SENTIMENT_WEIGHTS: Mapping[str, int] = {
    "Negative": 30,
    "Neutral": 10,
    "Positive": -10,
}

URGENCY_WEIGHTS: Mapping[str, int] = {
    "High": 25,
    "Medium": 15,
    "Low": 5,
}

THEME_WEIGHTS: Mapping[str, int] = {
    "Billing": 15,
    "Pricing": 12,
    "Documentation": 10,
    "Performance": 8,
    "Developer Experience": 5,
    "Other": 0,
}


def _weight(table: Mapping[str, int], key: str) -> int:
    # Unmapped keys contribute nothing.
    return table.get(key, 0)


def score_priority(sentiment: str, urgency: str, theme: str) -> int:
    """Return the 0-100 priority score for one classified record."""
    total = (
        BASE_SCORE
        + _weight(SENTIMENT_WEIGHTS, sentiment)
        + _weight(URGENCY_WEIGHTS, urgency)
        + _weight(THEME_WEIGHTS, theme)
    )
    return max(MIN_SCORE, min(MAX_SCORE, total))


class PriorityScorer:
    """Batch scorer over raw records or feedback items."""

    def score_items(
        self, records: Sequence[FeedbackItem | Mapping[str, Any]]
    ) -> list[int]:
        """Score a batch, preserving input order.

        Accepts either :class:`FeedbackItem` instances or dicts carrying
        ``sentiment``, ``urgency`` and ``theme`` keys.
        """
        if not records:
            return []

        n = len(records)
        sent = np.empty(n, dtype=np.int64)
        urg = np.empty(n, dtype=np.int64)
        theme = np.empty(n, dtype=np.int64)

        for i, rec in enumerate(records):
            fields = rec if isinstance(rec, Mapping) else vars(rec)
            sent[i] = _weight(SENTIMENT_WEIGHTS, fields["sentiment"])
            urg[i] = _weight(URGENCY_WEIGHTS, fields["urgency"])
            theme[i] = _weight(THEME_WEIGHTS, fields["theme"])

        totals = np.clip(BASE_SCORE + sent + urg + theme, MIN_SCORE, MAX_SCORE)
        logger.debug("PriorityScorer: scored %d records", n)
        return [int(t) for t in totals]
