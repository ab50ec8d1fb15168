"""Storage layer - SQLite key-value store, feedback source and digest cache."""

from triage.storage.db import KVStore
from triage.storage.models import StoreResult
from triage.storage.repository import FeedbackRepository

__all__ = ["FeedbackRepository", "KVStore", "StoreResult"]
