"""
Mock LLM Client - Template expansions, truncation summaries, long-word keywords.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

__all__ = ["MockLLMClient"]

_WORD_SPLIT_RE = re.compile(r"[ ,.!?;:\r\n]+")


class MockLLMClient:
    """Language model stand-in with fixed, predictable outputs."""

    def __init__(self, max_keywords: int = 10) -> None:
        self.max_keywords = max_keywords

    async def expand_query(self, query: str) -> list[str]:
        """Generate simple variations of the query."""
        expansions = [
            f"What is {query}?",
            f"Explain {query}",
            f"How does {query} work?",
            f"Information about {query}",
            f"Details on {query}",
        ]
        logger.debug("Generated %d query expansions", len(expansions))
        return expansions

    async def summarize(self, text: str) -> str:
        """First 100 characters, cut at the first sentence end."""
        if not text or not text.strip():
            return ""

        summary = text[:100].strip() + "..." if len(text) > 100 else text.strip()
        first_period = summary.find(".")
        if first_period > 0:
            summary = summary[: first_period + 1]
        return summary

    async def extract_keywords(self, text: str) -> list[str]:
        """Distinct lower-cased words longer than five characters."""
        if not text or not text.strip():
            return []

        keywords: list[str] = []
        for word in _WORD_SPLIT_RE.split(text):
            word = word.lower()
            if len(word) > 5 and word not in keywords:
                keywords.append(word)
                if len(keywords) >= self.max_keywords:
                    break
        return keywords
