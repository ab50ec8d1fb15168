"""Feedback item source and digest cache on top of the key-value store.

Every operation here is best-effort: reads fall back to the injected seed
items and writes report a :class:`StoreResult` instead of raising.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from triage.feedback.models import FeedbackItem, InvalidFeedbackError, parse_items
from triage.storage.db import KVStore
from triage.storage.models import StoreResult

if TYPE_CHECKING:
    from triage.digest.generator import Digest

logger = logging.getLogger(__name__)

ITEMS_KEY = "feedback_items"
DIGEST_KEY = "latest_digest"


class FeedbackRepository:
    """Load feedback items and cache digests.

    ``fallback`` supplies the items served when the store is empty or its
    contents cannot be read.
    """

    def __init__(self, store: KVStore, fallback: Callable[[], List[FeedbackItem]]):
        self.store = store
        self.fallback = fallback

    async def load_items(self) -> List[FeedbackItem]:
        try:
            raw = await self.store.get(ITEMS_KEY)
            if raw:
                parsed = json.loads(raw)
                if isinstance(parsed, list) and parsed:
                    return parse_items(parsed)
                logger.warning("Stored feedback is empty or not a list; using fallback items")
        except (json.JSONDecodeError, InvalidFeedbackError) as e:
            logger.error("Failed to parse stored feedback: %s", e)
        except Exception as e:
            logger.error("Failed to load feedback from store: %s", e)
        return self.fallback()

    async def save_items(self, items: Sequence[FeedbackItem]) -> StoreResult:
        try:
            await self.store.put(ITEMS_KEY, json.dumps([item.to_dict() for item in items]))
        except Exception as e:
            logger.error("Failed to save feedback items: %s", e)
            return StoreResult(key=ITEMS_KEY, error_message=str(e))
        logger.info("Saved %d feedback items", len(items))
        return StoreResult(key=ITEMS_KEY, count=len(items))

    async def seed(self) -> StoreResult:
        """Replace the stored items with the fallback sample set."""
        return await self.save_items(self.fallback())

    async def cache_digest(self, digest: Digest) -> StoreResult:
        try:
            await self.store.put(DIGEST_KEY, json.dumps(digest.to_dict()))
        except Exception as e:
            logger.error("Failed to cache digest: %s", e)
            return StoreResult(key=DIGEST_KEY, error_message=str(e))
        return StoreResult(key=DIGEST_KEY, count=1)

    async def latest_digest(self) -> Optional[Digest]:
        """Last cached digest, or None. Not used by the digest pipeline itself."""
        from triage.digest.generator import Digest

        raw = await self.store.get(DIGEST_KEY)
        if not raw:
            return None
        try:
            return Digest.from_dict(json.loads(raw))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Cached digest is unreadable: %s", e)
            return None
