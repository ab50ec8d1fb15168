"""Feedback item model and the enum contract enforced at ingestion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from triage.feedback.scorer import PriorityScorer, score_priority

SOURCES = ("support", "github", "community", "twitter")
SENTIMENTS = ("Positive", "Neutral", "Negative")
THEMES = (
    "Documentation",
    "Developer Experience",
    "Performance",
    "Pricing",
    "Billing",
    "Other",
)
URGENCIES = ("High", "Medium", "Low")


class InvalidFeedbackError(ValueError):
    """Raised when a raw record violates the feedback enum contract."""


def _require(field_name: str, value: Any, allowed: tuple[str, ...]) -> str:
    if value not in allowed:
        raise InvalidFeedbackError(
            f"{field_name}={value!r} is not one of {', '.join(allowed)}"
        )
    return value


@dataclass(frozen=True)
class FeedbackItem:
    """A single classified piece of customer feedback.

    ``priority_score`` is derived from sentiment, urgency and theme; build
    items through :meth:`create` or :meth:`from_dict` so it stays consistent.
    """

    id: str
    source: str  # "support" | "github" | "community" | "twitter"
    text: str
    sentiment: str  # "Positive" | "Neutral" | "Negative"
    theme: str
    urgency: str  # "High" | "Medium" | "Low"
    priority_score: int

    @classmethod
    def create(
        cls,
        id: str,
        source: str,
        text: str,
        sentiment: str,
        theme: str,
        urgency: str,
    ) -> FeedbackItem:
        """Validate the enum fields and compute the priority score."""
        return cls.from_dict({
            "id": id,
            "source": source,
            "text": text,
            "sentiment": sentiment,
            "theme": theme,
            "urgency": urgency,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeedbackItem:
        """Build from a wire/storage dict (camelCase keys).

        Any stored ``priorityScore`` is ignored and recomputed.
        """
        fields = _validated_fields(data)
        score = score_priority(fields["sentiment"], fields["urgency"], fields["theme"])
        return cls(priority_score=score, **fields)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "text": self.text,
            "sentiment": self.sentiment,
            "theme": self.theme,
            "urgency": self.urgency,
            "priorityScore": self.priority_score,
        }


def _validated_fields(data: Any) -> dict[str, str]:
    if not isinstance(data, dict):
        raise InvalidFeedbackError(f"expected an object, got {type(data).__name__}")
    try:
        return {
            "id": str(data["id"]),
            "source": _require("source", data["source"], SOURCES),
            "text": str(data["text"]),
            "sentiment": _require("sentiment", data["sentiment"], SENTIMENTS),
            "theme": _require("theme", data["theme"], THEMES),
            "urgency": _require("urgency", data["urgency"], URGENCIES),
        }
    except KeyError as e:
        raise InvalidFeedbackError(f"missing field {e.args[0]!r}") from e


def parse_items(records: Iterable[Any]) -> list[FeedbackItem]:
    """Validate a batch of raw records and score them in one pass.

    Raises :class:`InvalidFeedbackError` on the first bad record.
    """
    fields = [_validated_fields(r) for r in records]
    scores = PriorityScorer().score_items(fields)
    return [
        FeedbackItem(priority_score=score, **f)
        for f, score in zip(fields, scores)
    ]
