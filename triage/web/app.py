"""aiohttp application serving the digest as JSON and HTML.

Routes:
    GET  /        → redirect to /ui
    GET  /digest  → raw digest JSON
    GET  /ui      → HTML dashboard
    GET  /api     → HTML page with the digest as formatted JSON
    POST /seed    → reseed the store with the built-in sample set
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, List, Tuple

from aiohttp import web

from triage.digest.generator import Digest, DigestGenerator
from triage.feedback.filters import FeedbackFilter
from triage.feedback.models import FeedbackItem
from triage.feedback.seed import seed_items
from triage.storage.db import KVStore
from triage.storage.repository import FeedbackRepository
from triage.web.render import render_dashboard, render_json_page

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    repository: FeedbackRepository
    generator: DigestGenerator


CONTEXT_KEY = web.AppKey("context", AppContext)


async def build_digest(
    ctx: AppContext, request: web.Request
) -> Tuple[Digest, FeedbackFilter, List[FeedbackItem]]:
    """Load, filter, assemble and cache a digest for one request."""
    filters = FeedbackFilter.from_query(request.query)
    items = filters.apply(await ctx.repository.load_items())
    digest = await ctx.generator.generate_digest(items)

    result = await ctx.repository.cache_digest(digest)
    if not result.success:
        logger.warning("Digest not cached: %s", result.error_message)
    return digest, filters, items


async def index(request: web.Request) -> web.Response:
    raise web.HTTPFound("/ui")


async def digest_json(request: web.Request) -> web.Response:
    digest, _, _ = await build_digest(request.app[CONTEXT_KEY], request)
    return web.json_response(digest.to_dict(), dumps=lambda d: json.dumps(d, indent=2))


async def dashboard(request: web.Request) -> web.Response:
    digest, filters, items = await build_digest(request.app[CONTEXT_KEY], request)
    return web.Response(
        text=render_dashboard(digest, filters, items), content_type="text/html"
    )


async def api_page(request: web.Request) -> web.Response:
    digest, filters, _ = await build_digest(request.app[CONTEXT_KEY], request)
    return web.Response(text=render_json_page(digest, filters), content_type="text/html")


async def seed(request: web.Request) -> web.Response:
    result = await request.app[CONTEXT_KEY].repository.seed()
    if not result.success:
        return web.json_response(
            {"ok": False, "message": "Failed to seed store"}, status=500
        )
    return web.json_response(
        {"ok": True, "message": "Seeded store with sample feedback", "count": result.count}
    )


def create_app(repository: FeedbackRepository, generator: DigestGenerator) -> web.Application:
    app = web.Application()
    app[CONTEXT_KEY] = AppContext(repository=repository, generator=generator)
    routes = [web.post("/seed", seed)]
    # Page routes answer POST the same as GET.
    for path, handler in (
        ("/", index),
        ("/digest", digest_json),
        ("/ui", dashboard),
        ("/api", api_page),
    ):
        routes.append(web.get(path, handler))
        routes.append(web.post(path, handler))
    app.add_routes(routes)
    return app


def create_app_from_config(config: dict[str, Any]) -> web.Application:
    """Build the app with its own KV store, opened and closed with the app."""
    store = KVStore(config.get("storage", {}).get("db_path", "data/feedback.db"))
    app = create_app(FeedbackRepository(store, fallback=seed_items), DigestGenerator(config))

    async def _open(app: web.Application) -> None:
        await store.initialize()

    async def _close(app: web.Application) -> None:
        await store.close()

    app.on_startup.append(_open)
    app.on_cleanup.append(_close)
    return app
