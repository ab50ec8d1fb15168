"""Feedback model, priority scoring, filtering and aggregation."""

from triage.feedback.aggregator import AggregateStats, Aggregator, ThemeCount
from triage.feedback.filters import FeedbackFilter
from triage.feedback.models import FeedbackItem, InvalidFeedbackError, parse_items
from triage.feedback.scorer import PriorityScorer, score_priority

__all__ = [
    "AggregateStats",
    "Aggregator",
    "FeedbackFilter",
    "FeedbackItem",
    "InvalidFeedbackError",
    "PriorityScorer",
    "ThemeCount",
    "parse_items",
    "score_priority",
]
