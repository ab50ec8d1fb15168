"""Digest generation: aggregation and PM summarization."""

from triage.digest.generator import Digest, DigestGenerator
from triage.digest.summarizer import GenerationResult, LLMGenerator, PMSummarizer, SummaryResult

__all__ = [
    "Digest",
    "DigestGenerator",
    "GenerationResult",
    "LLMGenerator",
    "PMSummarizer",
    "SummaryResult",
]
