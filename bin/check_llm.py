#!/usr/bin/env python3
"""Quick check: ask the configured LLM provider for a PM summary of the sample set. Run from project root."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Ensure project root is on path
root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(root))

from triage.config import load_config
from triage.digest.summarizer import SOURCE_AI, PMSummarizer
from triage.feedback.aggregator import Aggregator
from triage.feedback.seed import seed_items


def main() -> None:
    config = load_config(str(root / "config.yaml"))
    provider = config.get("llm", {}).get("provider", "none")
    if provider == "none":
        print("Config llm.provider is 'none'. Pick a provider to test it.", file=sys.stderr)
        sys.exit(1)

    stats = Aggregator().aggregate(seed_items())
    result = asyncio.run(
        PMSummarizer(config).summarize(
            stats.sentiment_breakdown, stats.top_themes, stats.needs_attention
        )
    )

    print(f"Summary ({result.source}):", result.text)
    if result.source != SOURCE_AI:
        print(f"FAILED: provider {provider!r} did not produce a usable summary.", file=sys.stderr)
        sys.exit(1)
    print(f"OK: {provider} summarizer works.")


if __name__ == "__main__":
    main()
