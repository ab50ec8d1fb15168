"""Built-in sample feedback used to seed the store and as the load fallback."""

from __future__ import annotations

from triage.feedback.models import FeedbackItem, parse_items

SEED_RECORDS = [
    {
        "id": "1",
        "source": "support",
        "text": "The API documentation is unclear and missing examples",
        "sentiment": "Negative",
        "theme": "Documentation",
        "urgency": "High",
    },
    {
        "id": "2",
        "source": "github",
        "text": "Love the new features! Keep up the great work",
        "sentiment": "Positive",
        "theme": "Developer Experience",
        "urgency": "Low",
    },
    {
        "id": "3",
        "source": "community",
        "text": "Performance has improved significantly in the latest release",
        "sentiment": "Positive",
        "theme": "Performance",
        "urgency": "Medium",
    },
    {
        "id": "4",
        "source": "twitter",
        "text": "Pricing is too expensive for small teams",
        "sentiment": "Negative",
        "theme": "Pricing",
        "urgency": "High",
    },
    {
        "id": "5",
        "source": "support",
        "text": "Billing system is confusing and hard to understand",
        "sentiment": "Negative",
        "theme": "Billing",
        "urgency": "High",
    },
    {
        "id": "6",
        "source": "github",
        "text": "The developer experience is excellent, very intuitive",
        "sentiment": "Positive",
        "theme": "Developer Experience",
        "urgency": "Low",
    },
    {
        "id": "7",
        "source": "community",
        "text": "Documentation could use more real-world examples",
        "sentiment": "Neutral",
        "theme": "Documentation",
        "urgency": "Medium",
    },
    {
        "id": "8",
        "source": "support",
        "text": "Response times are slow during peak hours",
        "sentiment": "Negative",
        "theme": "Performance",
        "urgency": "High",
    },
    {
        "id": "9",
        "source": "twitter",
        "text": "Great customer service, resolved my issue quickly",
        "sentiment": "Positive",
        "theme": "Other",
        "urgency": "Low",
    },
    {
        "id": "10",
        "source": "github",
        "text": "The setup process was straightforward and well-documented",
        "sentiment": "Positive",
        "theme": "Documentation",
        "urgency": "Low",
    },
    {
        "id": "11",
        "source": "community",
        "text": "Would like to see more advanced features in the pricing tier",
        "sentiment": "Neutral",
        "theme": "Pricing",
        "urgency": "Medium",
    },
    {
        "id": "12",
        "source": "support",
        "text": "Billing invoice format is confusing and lacks details",
        "sentiment": "Negative",
        "theme": "Billing",
        "urgency": "Medium",
    },
]


def seed_items() -> list[FeedbackItem]:
    """Return a fresh, scored copy of the sample set."""
    return parse_items(SEED_RECORDS)
