"""PM summary with multi-provider LLM support and a deterministic rule-based fallback."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

import aiohttp

from triage.feedback.aggregator import ThemeCount
from triage.feedback.models import FeedbackItem

logger = logging.getLogger(__name__)

SOURCE_AI = "ai"
SOURCE_RULE_BASED = "rule-based"

MIN_SUMMARY_LENGTH = 20
NEGATIVE_RATIO_THRESHOLD = 0.4
PROMPT_THEMES = 3
PROMPT_ITEMS = 3
NO_THEME_PLACEHOLDER = "N/A"

WORKERS_AI_URL = "https://api.cloudflare.com/client/v4/accounts/{account_id}/ai/run/{model}"


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one call to a text-generation backend."""

    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and isinstance(self.text, str)


@dataclass(frozen=True)
class SummaryResult:
    text: str
    source: str  # "ai" | "rule-based"


class TextGenerator(Protocol):
    """Anything that can turn a prompt into text."""

    async def generate(self, prompt: str, temperature: float, max_tokens: int) -> GenerationResult:
        ...


def build_prompt(
    breakdown: dict[str, int],
    top_themes: Sequence[ThemeCount],
    needs_attention: Sequence[FeedbackItem],
) -> str:
    themes = ", ".join(f"{t.theme} ({t.count})" for t in top_themes[:PROMPT_THEMES])
    items = "; ".join(
        f'"{item.text}" ({item.theme}, priority {item.priority_score})'
        for item in needs_attention[:PROMPT_ITEMS]
    )
    return (
        "As a PM, write a 2-3 sentence summary for this feedback digest:\n\n"
        f"Sentiment: Positive={breakdown.get('Positive', 0)}, "
        f"Neutral={breakdown.get('Neutral', 0)}, "
        f"Negative={breakdown.get('Negative', 0)}\n\n"
        f"Top themes: {themes}\n\n"
        f"Top priority items: {items}\n\n"
        "Focus on: overall sentiment, key themes, and suggested next action. "
        "Keep it concise and actionable."
    )


def rule_based_summary(
    breakdown: dict[str, int],
    top_themes: Sequence[ThemeCount],
    needs_attention: Sequence[FeedbackItem],
) -> str:
    """Narrative built from the aggregate numbers alone."""
    total = sum(breakdown.get(s, 0) for s in ("Positive", "Neutral", "Negative"))
    negative_count = breakdown.get("Negative", 0)
    high_urgency_count = sum(1 for item in needs_attention if item.urgency == "High")
    top_theme = top_themes[0].theme if top_themes else NO_THEME_PLACEHOLDER

    if negative_count > NEGATIVE_RATIO_THRESHOLD * total:
        return (
            f"Critical issues need immediate attention: {negative_count} negative "
            f"feedback items primarily around {top_theme}. {high_urgency_count} "
            "high-urgency items require immediate action to prevent customer churn."
        )
    return (
        f"Feedback sentiment is generally stable with {top_theme} as the primary "
        f"theme. Focus on addressing {len(needs_attention)} high-priority items "
        "to improve overall satisfaction."
    )


class LLMGenerator:
    """Dispatch a prompt to the configured provider. Never raises."""

    SYSTEM_PROMPT = (
        "You are a product manager's assistant. Write a concise 2-3 sentence "
        "summary of customer feedback covering overall sentiment, key themes "
        "and a suggested next action."
    )

    def __init__(self, config: dict[str, Any]) -> None:
        llm = config.get("llm", {})
        self.provider: str = llm.get("provider", "none")
        self.model: str = llm.get("model", "gpt-4o-mini")
        self.timeout: float = llm.get("timeout_seconds", 30)
        self.local_url: str = llm.get("local_url", "http://localhost:11434/v1")
        self.local_model: str = llm.get("local_model", "llama3.2")
        self.workers_ai_model: str = llm.get("workers_ai_model", "@cf/meta/llama-3-8b-instruct")
        self.workers_ai_account_id: str = llm.get("workers_ai_account_id") or os.environ.get(
            "CLOUDFLARE_ACCOUNT_ID", ""
        )
        self.workers_ai_token: str = llm.get("workers_ai_token") or os.environ.get(
            "CLOUDFLARE_API_TOKEN", ""
        )

    async def generate(self, prompt: str, temperature: float, max_tokens: int) -> GenerationResult:
        try:
            if self.provider == "openai":
                text = await self._call_openai(prompt, temperature, max_tokens)
            elif self.provider == "anthropic":
                text = await self._call_anthropic(prompt, temperature, max_tokens)
            elif self.provider == "local":
                text = await self._call_local(prompt, temperature, max_tokens)
            elif self.provider == "workers_ai":
                text = await self._call_workers_ai(prompt, temperature, max_tokens)
            elif self.provider == "none":
                return GenerationResult(error="no LLM provider configured")
            else:
                return GenerationResult(error=f"unknown provider {self.provider!r}")
        except Exception as e:
            return GenerationResult(error=f"{type(e).__name__}: {e}")
        if not isinstance(text, str):
            return GenerationResult(
                error=f"{self.provider} returned {type(text).__name__}, expected text"
            )
        return GenerationResult(text=text)

    # ------------------------------------------------------------------
    # Provider implementations
    # ------------------------------------------------------------------

    async def _call_openai(self, prompt: str, temperature: float, max_tokens: int) -> str:
        from openai import AsyncOpenAI

        async with AsyncOpenAI(timeout=self.timeout) as client:
            resp = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        return resp.choices[0].message.content or ""

    async def _call_anthropic(self, prompt: str, temperature: float, max_tokens: int) -> str:
        from anthropic import AsyncAnthropic

        async with AsyncAnthropic(timeout=self.timeout) as client:
            resp = await client.messages.create(
                model=self.model or "claude-haiku-4-5-20251001",
                max_tokens=max_tokens,
                temperature=temperature,
                system=self.SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        return resp.content[0].text

    async def _call_local(self, prompt: str, temperature: float, max_tokens: int) -> str:
        """Call a local Ollama-compatible OpenAI API."""
        from openai import AsyncOpenAI

        async with AsyncOpenAI(
            base_url=self.local_url, api_key="ollama", timeout=self.timeout
        ) as client:
            resp = await client.chat.completions.create(
                model=self.local_model,
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        return resp.choices[0].message.content or ""

    async def _call_workers_ai(self, prompt: str, temperature: float, max_tokens: int) -> str:
        """Call Cloudflare Workers AI over its REST endpoint."""
        if not self.workers_ai_account_id or not self.workers_ai_token:
            raise RuntimeError("Workers AI account id / token not set")
        url = WORKERS_AI_URL.format(
            account_id=self.workers_ai_account_id, model=self.workers_ai_model
        )
        payload = {
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.workers_ai_token}"}
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url, json=payload, headers=headers) as resp:
                resp.raise_for_status()
                data = await resp.json()
        return (data.get("result") or {}).get("response") or ""


class PMSummarizer:
    """Produce the PM-facing summary, preferring the LLM and falling back to rules."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        generator: Optional[TextGenerator] = None,
    ) -> None:
        config = config or {}
        llm = config.get("llm", {})
        self.temperature: float = llm.get("temperature", 0.2)
        self.max_tokens: int = llm.get("max_tokens", 150)
        self.generator: TextGenerator = generator or LLMGenerator(config)

    async def summarize(
        self,
        breakdown: dict[str, int],
        top_themes: Sequence[ThemeCount],
        needs_attention: Sequence[FeedbackItem],
    ) -> SummaryResult:
        prompt = build_prompt(breakdown, top_themes, needs_attention)
        try:
            result = await self.generator.generate(prompt, self.temperature, self.max_tokens)
        except Exception as e:
            result = GenerationResult(error=f"{type(e).__name__}: {e}")

        if result.success:
            text = result.text.strip()
            if len(text) > MIN_SUMMARY_LENGTH:
                return SummaryResult(text=text, source=SOURCE_AI)
            logger.warning(
                "AI summary too short (%d chars), using rule-based fallback", len(text)
            )
        else:
            logger.warning("AI summary generation failed: %s", result.error or "non-text output")

        return SummaryResult(
            text=rule_based_summary(breakdown, top_themes, needs_attention),
            source=SOURCE_RULE_BASED,
        )
