"""
HTML rendering for the digest dashboard and the JSON view page.
"""

from __future__ import annotations

import html
import json
from typing import Sequence
from urllib.parse import urlencode

from triage.digest.generator import Digest
from triage.feedback.filters import FeedbackFilter
from triage.feedback.models import FeedbackItem

FEEDBACK_LIST_LIMIT = 12


def _e(value: object) -> str:
    return html.escape(str(value), quote=True)


def _link(path: str, params: dict[str, str]) -> str:
    query = urlencode(params)
    return _e(f"{path}?{query}" if query else path)


def _source_label(digest: Digest) -> str:
    return "AI" if digest.summary_source == "ai" else "Rule-based (fallback)"


def render_dashboard(
    digest: Digest, filters: FeedbackFilter, items: Sequence[FeedbackItem]
) -> str:
    """Render the dashboard page for ``digest`` built from ``items``."""
    params = filters.as_params()
    active = ", ".join(f"{k}={v}" for k, v in params.items())
    filter_block = ""
    if filters.active:
        filter_block = f"""
        <div class="filter-info">
            <div class="filter-text">Filters active: {_e(active)}</div>
            <a href="/ui" class="clear-filters">Clear filters</a>
        </div>
        {_render_feedback_list(items[:FEEDBACK_LIST_LIMIT])}
        """

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Feedback Triage Digest</title>
    <style>
        {_get_base_css()}
        {_get_dashboard_css()}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>Feedback Triage Digest</h1>
            <div class="header-actions">
                <form method="POST" action="/seed" style="display: inline;">
                    <button type="submit" class="seed-btn">Seed store (demo)</button>
                </form>
                <a href="{_link('/api', params)}" class="view-api-btn">View JSON API</a>
            </div>
        </div>
        <div class="last-updated">Last updated: {_e(digest.generated_at.strftime("%Y-%m-%d %H:%M:%S UTC"))}</div>
        {filter_block}
        {_render_sentiment_tiles(digest, filters)}
        {_render_themes(digest, filters)}
        {_render_needs_attention(digest)}
        <div class="section">
            <h2>PM Summary</h2>
            <div class="summary">{_e(digest.pm_summary)}</div>
            <div class="summary-source">Summary source: {_source_label(digest)}</div>
        </div>
    </div>
</body>
</html>"""


def render_json_page(digest: Digest, filters: FeedbackFilter) -> str:
    """Render the digest as pretty-printed JSON inside an HTML page."""
    params = filters.as_params()
    body = json.dumps(digest.to_dict(), indent=2)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Feedback Triage Digest API (JSON)</title>
    <style>
        {_get_base_css()}
        .back-btn {{ background: #6b7280; color: white; padding: 10px 20px; border-radius: 6px; text-decoration: none; font-weight: 500; }}
        .raw-btn {{ background: #8b5cf6; color: white; padding: 10px 20px; border-radius: 6px; text-decoration: none; font-weight: 500; }}
        pre {{ background: #f8f9fa; padding: 20px; border-radius: 6px; overflow-x: auto; border: 1px solid #e5e7eb; font-size: 14px; line-height: 1.5; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>Feedback Triage Digest API (JSON)</h1>
            <div class="header-actions">
                <a href="{_link('/digest', params)}" class="raw-btn">View raw JSON</a>
                <a href="{_link('/ui', params)}" class="back-btn">Back to dashboard</a>
            </div>
        </div>
        <div class="summary-source">Summary source: {_source_label(digest)}</div>
        <pre>{_e(body)}</pre>
    </div>
</body>
</html>"""


def _render_feedback_list(items: Sequence[FeedbackItem]) -> str:
    rows = "".join(
        f"""
        <li class="feedback-item">
            <div class="feedback-text">"{_e(item.text)}"</div>
            <div class="feedback-meta">
                <span class="meta-item">Source: {_e(item.source)}</span>
                <span class="meta-item">Theme: {_e(item.theme)}</span>
                <span class="meta-item sentiment-{_e(item.sentiment.lower())}">Sentiment: {_e(item.sentiment)}</span>
                <span class="meta-item urgency-{_e(item.urgency.lower())}">Urgency: {_e(item.urgency)}</span>
            </div>
            <div class="priority-score">Priority Score: {item.priority_score}</div>
        </li>"""
        for item in items
    )
    return f"""
        <div class="section">
            <h2>Feedback List ({len(items)} items)</h2>
            <ul class="feedback-list">{rows}</ul>
        </div>"""


def _render_sentiment_tiles(digest: Digest, filters: FeedbackFilter) -> str:
    tiles = []
    for sentiment, count in digest.sentiment_breakdown.items():
        params = {"sentiment": sentiment.lower()}
        if filters.theme:
            params["theme"] = filters.theme
        tiles.append(
            f"""
            <a href="{_link('/ui', params)}" class="tile {sentiment.lower()}">
                <span class="count">{count}</span>
                {_e(sentiment)}
            </a>"""
        )
    return f'<div class="overview">{"".join(tiles)}</div>'


def _render_themes(digest: Digest, filters: FeedbackFilter) -> str:
    rows = []
    for t in digest.top_themes:
        params = {"theme": t.theme}
        if filters.sentiment:
            params["sentiment"] = filters.sentiment
        rows.append(
            f"""
            <li>
                <a href="{_link('/ui', params)}" class="theme-item">
                    <span>{_e(t.theme)}</span>
                    <span><strong>{t.count}</strong> items</span>
                </a>
            </li>"""
        )
    return f"""
        <div class="section">
            <h2>Top Themes ({len(digest.top_themes)})</h2>
            <ul class="themes">{"".join(rows)}</ul>
        </div>"""


def _render_needs_attention(digest: Digest) -> str:
    rows = "".join(
        f"""
        <li class="need-item">
            <div class="need-text">"{_e(item.text)}"</div>
            <div class="need-meta">Source: {_e(item.source)} | Theme: {_e(item.theme)} | Urgency: {_e(item.urgency)}</div>
            <div class="priority-score">Priority Score: {item.priority_score}</div>
        </li>"""
        for item in digest.needs_attention
    )
    return f"""
        <div class="section">
            <h2>Needs Attention ({len(digest.needs_attention)})</h2>
            <ul class="needs-attention">{rows}</ul>
        </div>"""


def _get_base_css() -> str:
    return """
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; margin: 0; padding: 20px; background: #f5f5f5; }
        .container { max-width: 1200px; margin: 0 auto; background: white; padding: 30px; border-radius: 8px; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        .header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 30px; }
        h1 { color: #333; margin: 0; }
        .header-actions { display: flex; gap: 10px; align-items: center; }
        .summary-source { font-size: 12px; color: #6b7280; margin-top: 10px; font-style: italic; }
    """


def _get_dashboard_css() -> str:
    return """
        .seed-btn { background: #10b981; color: white; padding: 10px 20px; border-radius: 6px; border: none; font-weight: 500; cursor: pointer; font-size: 14px; }
        .view-api-btn { background: #3b82f6; color: white; padding: 10px 20px; border-radius: 6px; text-decoration: none; font-weight: 500; }
        .last-updated { color: #666; margin-bottom: 20px; font-size: 14px; }
        .filter-info { background: #e5e7eb; padding: 15px; border-radius: 6px; margin-bottom: 20px; display: flex; justify-content: space-between; align-items: center; }
        .filter-text { font-weight: 500; color: #333; }
        .clear-filters { background: #6b7280; color: white; padding: 8px 16px; border-radius: 4px; text-decoration: none; font-size: 14px; }
        .overview { display: grid; grid-template-columns: repeat(auto-fit, minmax(150px, 1fr)); gap: 15px; margin-bottom: 30px; }
        .tile { padding: 20px; border-radius: 6px; text-align: center; text-decoration: none; color: white; font-weight: bold; }
        .positive { background: #22c55e; }
        .neutral { background: #f59e0b; }
        .negative { background: #ef4444; }
        .tile .count { font-size: 24px; display: block; margin-bottom: 5px; }
        .section { margin-bottom: 30px; }
        .section h2 { color: #333; border-bottom: 2px solid #e5e7eb; padding-bottom: 10px; }
        .themes, .feedback-list, .needs-attention { list-style: none; padding: 0; }
        .theme-item { padding: 10px; margin: 5px 0; background: #f8f9fa; border-radius: 4px; text-decoration: none; color: #333; display: flex; justify-content: space-between; }
        .feedback-item { padding: 15px; margin: 10px 0; border: 1px solid #e5e7eb; border-radius: 6px; background: #fafafa; }
        .feedback-text, .need-text { font-weight: 500; margin-bottom: 8px; color: #333; }
        .feedback-meta { display: flex; flex-wrap: wrap; gap: 10px; font-size: 12px; color: #666; margin-bottom: 8px; }
        .meta-item { background: #f3f4f6; padding: 4px 8px; border-radius: 4px; }
        .priority-score { color: #ef4444; font-weight: bold; font-size: 14px; }
        .need-item { padding: 15px; margin: 10px 0; border-left: 4px solid #ef4444; background: #fef2f2; border-radius: 4px; }
        .need-meta { font-size: 12px; color: #666; margin-bottom: 5px; }
        .summary { background: #f0f9ff; padding: 20px; border-radius: 6px; border-left: 4px solid #3b82f6; }
        .sentiment-positive, .urgency-low { color: #22c55e; font-weight: 500; }
        .sentiment-neutral, .urgency-medium { color: #f59e0b; font-weight: 500; }
        .sentiment-negative, .urgency-high { color: #ef4444; font-weight: 500; }
    """
