"""Tests for the feedback layer: model validation, scoring, filtering, aggregation."""

from __future__ import annotations

import itertools

import pytest

from triage.feedback.aggregator import (
    ATTENTION_LIMIT,
    ATTENTION_THRESHOLD,
    TOP_THEMES_LIMIT,
    Aggregator,
    ThemeCount,
)
from triage.feedback.filters import FeedbackFilter
from triage.feedback.models import (
    SENTIMENTS,
    THEMES,
    URGENCIES,
    FeedbackItem,
    InvalidFeedbackError,
    parse_items,
)
from triage.feedback.scorer import PriorityScorer, score_priority
from triage.feedback.seed import SEED_RECORDS, seed_items


# --- Helpers ---

_ids = itertools.count(1)


def make_item(
    sentiment: str = "Neutral",
    theme: str = "Other",
    urgency: str = "Low",
    source: str = "support",
    text: str = "Some feedback",
) -> FeedbackItem:
    return FeedbackItem.create(
        id=str(next(_ids)),
        source=source,
        text=text,
        sentiment=sentiment,
        theme=theme,
        urgency=urgency,
    )


# --- Scorer Tests ---

class TestScorer:
    def test_maximum_combination_is_clamped(self):
        # 50 + 30 + 25 + 15 = 120
        assert score_priority("Negative", "High", "Billing") == 100

    def test_lowest_valid_combination(self):
        # 50 - 10 + 5 + 0
        assert score_priority("Positive", "Low", "Other") == 45

    def test_mid_range_values(self):
        assert score_priority("Neutral", "Medium", "Documentation") == 85
        assert score_priority("Positive", "Medium", "Performance") == 63
        assert score_priority("Positive", "High", "Developer Experience") == 70

    def test_unmapped_theme_contributes_nothing(self):
        assert score_priority("Neutral", "Low", "Security") == score_priority("Neutral", "Low", "Other")

    def test_every_valid_combination_in_range_and_deterministic(self):
        for sentiment, urgency, theme in itertools.product(SENTIMENTS, URGENCIES, THEMES):
            first = score_priority(sentiment, urgency, theme)
            assert 0 <= first <= 100
            assert score_priority(sentiment, urgency, theme) == first

    def test_batch_matches_single(self):
        records = list(SEED_RECORDS)
        scores = PriorityScorer().score_items(records)
        assert scores == [
            score_priority(r["sentiment"], r["urgency"], r["theme"]) for r in records
        ]

    def test_batch_accepts_items(self):
        items = seed_items()
        assert PriorityScorer().score_items(items) == [i.priority_score for i in items]

    def test_batch_empty(self):
        assert PriorityScorer().score_items([]) == []


# --- Model Tests ---

class TestFeedbackItem:
    def test_create_derives_score(self):
        item = make_item(sentiment="Negative", theme="Pricing", urgency="High")
        assert item.priority_score == 100

    def test_from_dict_ignores_stored_score(self):
        item = FeedbackItem.from_dict({
            "id": "42",
            "source": "github",
            "text": "Docs are fine",
            "sentiment": "Positive",
            "theme": "Documentation",
            "urgency": "Low",
            "priorityScore": 99,
        })
        assert item.priority_score == 55

    def test_to_dict_uses_wire_names(self):
        data = make_item().to_dict()
        assert set(data) == {"id", "source", "text", "sentiment", "theme", "urgency", "priorityScore"}

    @pytest.mark.parametrize(
        "field,value",
        [
            ("sentiment", "Angry"),
            ("theme", "Security"),
            ("urgency", "Critical"),
            ("source", "email"),
        ],
    )
    def test_invalid_enum_rejected(self, field, value):
        record = dict(SEED_RECORDS[0], **{field: value})
        with pytest.raises(InvalidFeedbackError, match=field):
            FeedbackItem.from_dict(record)

    def test_missing_field_rejected(self):
        record = dict(SEED_RECORDS[0])
        del record["urgency"]
        with pytest.raises(InvalidFeedbackError, match="urgency"):
            FeedbackItem.from_dict(record)

    def test_non_object_rejected(self):
        with pytest.raises(InvalidFeedbackError):
            FeedbackItem.from_dict(["not", "a", "record"])

    def test_items_are_immutable(self):
        item = make_item()
        with pytest.raises(AttributeError):
            item.priority_score = 1

    def test_parse_items_stops_on_bad_record(self):
        records = [SEED_RECORDS[0], dict(SEED_RECORDS[1], sentiment="positive")]
        with pytest.raises(InvalidFeedbackError):
            parse_items(records)

    def test_seed_set(self):
        items = seed_items()
        assert len(items) == 12
        assert [i.id for i in items] == [str(n) for n in range(1, 13)]
        assert items[0].priority_score == 100
        assert items[8].priority_score == 45


# --- Filter Tests ---

class TestFeedbackFilter:
    def test_no_filter_keeps_everything(self):
        items = seed_items()
        f = FeedbackFilter.from_query({})
        assert not f.active
        assert f.apply(items) == items

    def test_sentiment_and_theme(self):
        items = seed_items()
        f = FeedbackFilter.from_query({"sentiment": "negative", "theme": "Billing"})
        result = f.apply(items)
        assert [i.id for i in result] == ["5", "12"]
        assert all(i.sentiment == "Negative" and i.theme == "Billing" for i in result)

    def test_sentiment_is_case_insensitive(self):
        f = FeedbackFilter.from_query({"sentiment": "NeGaTiVe"})
        assert f.sentiment == "negative"
        assert len(f.apply(seed_items())) == 5

    def test_theme_is_exact(self):
        f = FeedbackFilter.from_query({"theme": "billing"})
        assert f.apply(seed_items()) == []

    def test_empty_values_mean_no_filter(self):
        f = FeedbackFilter.from_query({"sentiment": "", "theme": ""})
        assert not f.active
        assert f.as_params() == {}

    def test_as_params_order(self):
        f = FeedbackFilter(sentiment="positive", theme="Pricing")
        assert list(f.as_params().items()) == [("sentiment", "positive"), ("theme", "Pricing")]


# --- Aggregator Tests ---

class TestAggregator:
    def test_empty_input(self):
        stats = Aggregator().aggregate([])
        assert stats.sentiment_breakdown == {"Positive": 0, "Neutral": 0, "Negative": 0}
        assert stats.top_themes == ()
        assert stats.needs_attention == ()
        assert stats.total == 0

    def test_seed_breakdown_sums_to_total(self):
        items = seed_items()
        stats = Aggregator().aggregate(items)
        assert stats.sentiment_breakdown == {"Positive": 5, "Neutral": 2, "Negative": 5}
        assert stats.total == len(items)

    def test_seed_top_themes(self):
        stats = Aggregator().aggregate(seed_items())
        assert stats.top_themes == (
            ThemeCount("Documentation", 3),
            ThemeCount("Developer Experience", 2),
            ThemeCount("Performance", 2),
            ThemeCount("Pricing", 2),
            ThemeCount("Billing", 2),
        )

    def test_theme_ties_keep_first_seen_order(self):
        items = [
            make_item(theme="Pricing"),
            make_item(theme="Billing"),
            make_item(theme="Billing"),
            make_item(theme="Pricing"),
            make_item(theme="Other"),
        ]
        themes = Aggregator().top_themes(items)
        assert [t.theme for t in themes] == ["Pricing", "Billing", "Other"]

    def test_absent_themes_not_reported(self):
        themes = Aggregator().top_themes([make_item(theme="Performance")])
        assert themes == [ThemeCount("Performance", 1)]

    def test_top_themes_sorted_and_bounded(self):
        counts = [t.count for t in Aggregator().top_themes(seed_items())]
        assert len(counts) <= 5
        assert counts == sorted(counts, reverse=True)

    def test_needs_attention_threshold_is_inclusive(self):
        at_threshold = make_item(sentiment="Positive", urgency="High", theme="Developer Experience")
        below = make_item(sentiment="Positive", urgency="Medium", theme="Pricing")
        assert at_threshold.priority_score == 70
        assert below.priority_score == 67
        assert Aggregator().needs_attention([below, at_threshold]) == [at_threshold]

    def test_needs_attention_seed(self):
        result = Aggregator().needs_attention(seed_items())
        assert [i.id for i in result] == ["1", "4", "5", "8", "12"]

    def test_needs_attention_sorted_stable_and_bounded(self):
        items = [
            make_item(sentiment="Neutral", urgency="Medium", theme="Documentation"),  # 85
            make_item(sentiment="Negative", urgency="High", theme="Other"),  # 100
            make_item(sentiment="Neutral", urgency="Medium", theme="Pricing"),  # 87
            make_item(sentiment="Negative", urgency="Low", theme="Other"),  # 85
            make_item(sentiment="Negative", urgency="Medium", theme="Other"),  # 95
            make_item(sentiment="Neutral", urgency="High", theme="Other"),  # 85
            make_item(sentiment="Positive", urgency="Low", theme="Other"),  # 45
        ]
        result = Aggregator().needs_attention(items)
        assert [i.id for i in result] == [items[1].id, items[4].id, items[2].id, items[0].id, items[3].id]
        assert all(i.priority_score >= 70 for i in result)

    def test_limits_are_fixed(self):
        assert (TOP_THEMES_LIMIT, ATTENTION_THRESHOLD, ATTENTION_LIMIT) == (5, 70, 5)

    def test_all_six_themes_truncated_to_five(self):
        items = [make_item(theme=t) for t in THEMES]
        items.append(make_item(theme="Other"))
        themes = Aggregator().top_themes(items)
        assert len(themes) == 5
        assert themes[0] == ThemeCount("Other", 2)

    def test_idempotent(self):
        items = seed_items()
        agg = Aggregator()
        assert agg.aggregate(items) == agg.aggregate(items)
