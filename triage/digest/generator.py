"""Digest assembler: aggregate → summarize → timestamp."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from dateutil.parser import isoparse

from triage.digest.summarizer import PMSummarizer, TextGenerator
from triage.feedback.aggregator import Aggregator, ThemeCount
from triage.feedback.models import FeedbackItem

logger = logging.getLogger(__name__)


def _isoformat(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Digest:
    """One digest, computed fresh per request."""

    generated_at: datetime
    total: int
    sentiment_breakdown: dict[str, int]
    pm_summary: str
    summary_source: str  # "ai" | "rule-based"
    top_themes: tuple[ThemeCount, ...] = field(default_factory=tuple)
    needs_attention: tuple[FeedbackItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": _isoformat(self.generated_at),
            "total": self.total,
            "sentimentBreakdown": dict(self.sentiment_breakdown),
            "topThemes": [t.to_dict() for t in self.top_themes],
            "needsAttention": [item.to_dict() for item in self.needs_attention],
            "pmSummary": self.pm_summary,
            "summarySource": self.summary_source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Digest:
        """Rebuild a cached digest (e.g. for status display)."""
        if not isinstance(data, dict):
            raise ValueError(f"expected a digest object, got {type(data).__name__}")
        return cls(
            generated_at=isoparse(data["generatedAt"]),
            total=data["total"],
            sentiment_breakdown=dict(data["sentimentBreakdown"]),
            top_themes=tuple(ThemeCount(t["theme"], t["count"]) for t in data.get("topThemes", [])),
            needs_attention=tuple(
                FeedbackItem.from_dict(item) for item in data.get("needsAttention", [])
            ),
            pm_summary=data["pmSummary"],
            summary_source=data["summarySource"],
        )


class DigestGenerator:
    """End-to-end digest pipeline over an already-filtered item sequence."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        generator: Optional[TextGenerator] = None,
    ) -> None:
        self.config = config or {}
        self.aggregator = Aggregator()
        self.summarizer = PMSummarizer(self.config, generator=generator)

    async def generate_digest(self, items: Sequence[FeedbackItem]) -> Digest:
        logger.info("DigestGenerator: starting with %d items", len(items))

        stats = self.aggregator.aggregate(items)
        summary = await self.summarizer.summarize(
            stats.sentiment_breakdown, stats.top_themes, stats.needs_attention
        )

        digest = Digest(
            generated_at=datetime.now(timezone.utc),
            total=len(items),
            sentiment_breakdown=stats.sentiment_breakdown,
            top_themes=stats.top_themes,
            needs_attention=stats.needs_attention,
            pm_summary=summary.text,
            summary_source=summary.source,
        )
        logger.info(
            "DigestGenerator: produced digest (total=%d, themes=%d, attention=%d, summary=%s)",
            digest.total,
            len(digest.top_themes),
            len(digest.needs_attention),
            digest.summary_source,
        )
        return digest
