"""CLI interface for the feedback triage digest.

Usage:
    python -m triage.pipeline.cli serve --port 8787
    python -m triage.pipeline.cli digest --sentiment negative --theme Billing
    python -m triage.pipeline.cli seed
    python -m triage.pipeline.cli status
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import click
from aiohttp import web
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from triage.config import DEFAULT_CONFIG_PATH, DEFAULT_DB_PATH, load_config
from triage.digest.generator import DigestGenerator
from triage.feedback.filters import FeedbackFilter
from triage.feedback.models import THEMES
from triage.feedback.seed import seed_items
from triage.storage.db import KVStore
from triage.storage.repository import FeedbackRepository
from triage.web.app import create_app_from_config

console = Console()


def run_async(coro):
    """Run an async function to completion."""
    return asyncio.run(coro)


def setup_logging(level: str) -> None:
    """Route log records to stderr through rich, once per process."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


@click.group()
@click.option("--config", default=DEFAULT_CONFIG_PATH, help="Config file path")
@click.option("--db", default=None, help="Database path (overrides config)")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
)
@click.pass_context
def cli(ctx, config: str, db: Optional[str], log_level: str):
    """Feedback triage digest CLI."""
    setup_logging(log_level)
    ctx.ensure_object(dict)
    cfg = load_config(config)
    if db:
        cfg.setdefault("storage", {})["db_path"] = db
    ctx.obj["config"] = cfg
    ctx.obj["db_path"] = cfg.get("storage", {}).get("db_path", DEFAULT_DB_PATH)


@cli.command()
@click.option("--host", default=None, help="Bind address (default from config)")
@click.option("--port", type=int, default=None, help="Port (default from config)")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int]):
    """Serve the digest over HTTP."""
    config = ctx.obj["config"]
    server = config.get("server", {})
    web.run_app(
        create_app_from_config(config),
        host=host or server.get("host", "127.0.0.1"),
        port=port or server.get("port", 8787),
        print=console.print,
    )


@cli.command()
@click.option("--sentiment", "-s", help="Filter by sentiment (positive/neutral/negative)")
@click.option("--theme", "-t", type=click.Choice(THEMES), help="Filter by theme")
@click.option("--json", "as_json", is_flag=True, help="Print raw digest JSON")
@click.pass_context
def digest(ctx, sentiment: Optional[str], theme: Optional[str], as_json: bool):
    """Compute a digest once over the stored items and print it."""

    async def _run():
        store = KVStore(ctx.obj["db_path"])
        await store.initialize()
        try:
            repo = FeedbackRepository(store, fallback=seed_items)
            filters = FeedbackFilter.from_query({"sentiment": sentiment or "", "theme": theme or ""})
            items = filters.apply(await repo.load_items())

            generator = DigestGenerator(ctx.obj["config"])
            if as_json:
                dig = await generator.generate_digest(items)
            else:
                with console.status("[bold green]Generating digest..."):
                    dig = await generator.generate_digest(items)
            await repo.cache_digest(dig)
            return dig
        finally:
            await store.close()

    dig = run_async(_run())
    if as_json:
        click.echo(json.dumps(dig.to_dict(), indent=2))
        return
    _print_digest(dig)


@cli.command()
@click.pass_context
def seed(ctx):
    """Write the built-in sample feedback into the store."""

    async def _run():
        store = KVStore(ctx.obj["db_path"])
        await store.initialize()
        try:
            return await FeedbackRepository(store, fallback=seed_items).seed()
        finally:
            await store.close()

    result = run_async(_run())
    if not result.success:
        console.print(f"[red]Seed failed:[/red] {result.error_message}")
        raise SystemExit(1)
    console.print(f"[green]Seeded {result.count} feedback items.[/green]")


@cli.command()
@click.pass_context
def status(ctx):
    """Show stored item count and the last cached digest."""

    async def _run():
        store = KVStore(ctx.obj["db_path"])
        await store.initialize()
        try:
            repo = FeedbackRepository(store, fallback=list)
            return await repo.load_items(), await repo.latest_digest()
        finally:
            await store.close()

    items, latest = run_async(_run())
    console.print("\n[bold]Store Status[/bold]")
    console.print(f"  Path: {ctx.obj['db_path']}")
    console.print(f"  Items: {len(items)}" if items else "  Items: none (seed fallback in use)")
    if latest is None:
        console.print("  Last digest: never")
        return
    console.print(f"  Last digest: {latest.generated_at:%Y-%m-%d %H:%M:%S} UTC")
    _print_digest(latest)


def _print_digest(dig) -> None:
    b = dig.sentiment_breakdown
    console.print(
        f"\n[bold]Digest[/bold] ({dig.total} items): "
        f"[green]{b['Positive']} positive[/green], "
        f"[yellow]{b['Neutral']} neutral[/yellow], "
        f"[red]{b['Negative']} negative[/red]"
    )

    themes = Table(title="Top Themes")
    themes.add_column("Theme", style="cyan")
    themes.add_column("Count", justify="right")
    for t in dig.top_themes:
        themes.add_row(t.theme, str(t.count))
    console.print(themes)

    attention = Table(title="Needs Attention")
    attention.add_column("Score", justify="right", style="red")
    attention.add_column("Theme", style="cyan")
    attention.add_column("Urgency")
    attention.add_column("Feedback", max_width=60)
    for item in dig.needs_attention:
        attention.add_row(str(item.priority_score), item.theme, item.urgency, escape(item.text))
    console.print(attention)

    console.print(f"\n[bold]PM Summary[/bold] ({dig.summary_source})")
    console.print(escape(dig.pm_summary))


def main():
    cli()


if __name__ == "__main__":
    main()
