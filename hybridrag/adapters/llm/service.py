"""
LLM Service - Language model access for query expansion and chunk enrichment.

Routes between:
- Ollama (local model server)
- Gemini (REST API with an API key)

Implements the LanguageModelClient contract by prompting the model and
parsing its plain-text replies.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import httpx

from hybridrag.config import LLMError, Settings, get_settings
from hybridrag.config.errors import ErrorCode, HybridRagError

from ..ollama import OllamaClient

logger = logging.getLogger(__name__)

__all__ = ["LLMResponse", "LLMService", "parse_list_response"]

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

EXPANSION_PROMPT = (
    "Rewrite the following search query in {count} different ways that keep its meaning. "
    "Return one rewrite per line with no numbering or commentary.\n\nQuery: {query}"
)
SUMMARY_PROMPT = "Summarize the following text in one or two sentences.\n\nText:\n{text}"
KEYWORDS_PROMPT = (
    "List up to {count} keywords or short key phrases for the following text, "
    "one per line, with no numbering or commentary.\n\nText:\n{text}"
)

_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•]+|\d+[.)]|\(\d+\))\s*")


def parse_list_response(text: str) -> list[str]:
    """
    Split a model reply into list items.

    Accepts one item per line or a single comma-separated line; strips
    bullets, numbering and surrounding quotes.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) == 1 and "," in lines[0]:
        lines = lines[0].split(",")

    items: list[str] = []
    for line in lines:
        item = _LIST_MARKER_RE.sub("", line).strip().strip("\"'").strip()
        if item:
            items.append(item)
    return items


@dataclass
class LLMResponse:
    """Response from LLM generation."""

    text: str
    model: str
    provider: str  # "gemini" or "ollama"
    tokens_used: int | None = None


class LLMService:
    """
    Unified LLM service supporting Ollama and Gemini.

    Example:
        >>> llm = LLMService(provider="ollama")
        >>> expansions = await llm.expand_query("escrow shortage")
        >>> summary = await llm.summarize(chunk_text)
    """

    def __init__(
        self,
        provider: str | None = None,
        settings: Settings | None = None,
        ollama_client: OllamaClient | None = None,
        http_client: httpx.AsyncClient | None = None,
        expansion_count: int = 5,
        max_keywords: int = 10,
    ) -> None:
        """
        Initialize LLM service.

        Args:
            provider: "ollama" or "gemini" (defaults to settings.llm_provider)
            settings: Application settings
            ollama_client: Shared Ollama client
            http_client: HTTP client for Gemini calls
            expansion_count: Paraphrases requested per query
            max_keywords: Keywords requested per chunk
        """
        self.settings = settings or get_settings()
        self.provider = provider or self.settings.llm_provider
        if self.provider not in ("ollama", "gemini"):
            raise LLMError(f"Unsupported LLM provider: {self.provider}")

        self._ollama = ollama_client or OllamaClient(self.settings.ollama_url)
        self._http = http_client
        self.expansion_count = expansion_count
        self.max_keywords = max_keywords

        logger.debug("LLM: using provider %s", self.provider)

    async def generate(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """
        Generate text response.

        Args:
            prompt: User prompt
            system_instruction: System prompt
            temperature: Override default temperature

        Returns:
            LLMResponse with generated text
        """
        if self.provider == "gemini":
            return await self._generate_gemini(prompt, system_instruction, temperature)
        return await self._generate_ollama(prompt, system_instruction, temperature)

    async def _generate_gemini(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate using the Gemini REST API."""
        api_key = self.settings.gemini_api_key
        if not api_key:
            raise HybridRagError(ErrorCode.LLM_AUTH_FAILED, "No Gemini API key configured")

        model = self.settings.gemini_model
        contents = []
        if system_instruction:
            contents.append({"role": "user", "parts": [{"text": system_instruction}]})
            contents.append({"role": "model", "parts": [{"text": "Understood."}]})
        contents.append({"role": "user", "parts": [{"text": prompt}]})

        body = {
            "contents": contents,
            "generationConfig": {
                "temperature": (
                    temperature if temperature is not None else self.settings.llm_temperature
                ),
            },
        }

        client = self._http or httpx.AsyncClient()
        try:
            response = await client.post(
                GEMINI_URL.format(model=model),
                headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                json=body,
                timeout=60.0,
            )
        except httpx.HTTPError as e:
            raise LLMError(f"Gemini request failed: {e}") from e
        finally:
            if self._http is None:
                await client.aclose()

        if response.status_code == 429:
            raise HybridRagError(
                ErrorCode.LLM_RATE_LIMITED, "Gemini quota exceeded", {"code": "QUOTA_EXCEEDED"}
            )
        if response.status_code != 200:
            logger.error("Gemini error: %s %s", response.status_code, response.text)
            raise LLMError(f"Gemini API error: {response.status_code}")

        data = response.json()

        text = ""
        candidates = data.get("candidates", [])
        if candidates:
            parts = candidates[0].get("content", {}).get("parts", [])
            if parts:
                text = parts[0].get("text", "")

        usage = data.get("usageMetadata", {})
        return LLMResponse(
            text=text,
            model=model,
            provider="gemini",
            tokens_used=usage.get("totalTokenCount"),
        )

    async def _generate_ollama(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate using local Ollama."""
        model = self.settings.ollama_model
        try:
            text = await self._ollama.generate(
                model,
                prompt,
                system=system_instruction,
                temperature=(
                    temperature if temperature is not None else self.settings.llm_temperature
                ),
            )
        except httpx.ConnectError as e:
            raise LLMError(
                "Ollama not running. Start with: ollama serve",
                {"hint": "Run 'ollama serve' in a terminal"},
            ) from e
        except httpx.HTTPError as e:
            raise LLMError(f"Ollama error: {e}") from e

        return LLMResponse(text=text, model=model, provider="ollama")

    async def expand_query(self, query: str) -> list[str]:
        """Generate alternate phrasings of a query."""
        response = await self.generate(
            EXPANSION_PROMPT.format(count=self.expansion_count, query=query),
            system_instruction="You rewrite search queries for a document retrieval system.",
        )
        return parse_list_response(response.text)[: self.expansion_count]

    async def summarize(self, text: str) -> str:
        """Generate a short summary of text."""
        response = await self.generate(SUMMARY_PROMPT.format(text=text))
        summary = response.text.strip()
        if not summary:
            raise HybridRagError(ErrorCode.LLM_INVALID_RESPONSE, "Empty summary returned")
        return summary

    async def extract_keywords(self, text: str) -> list[str]:
        """Extract keywords from text."""
        response = await self.generate(KEYWORDS_PROMPT.format(count=self.max_keywords, text=text))
        return parse_list_response(response.text)[: self.max_keywords]

    async def close(self) -> None:
        """Release HTTP resources."""
        await self._ollama.close()
        if self._http is not None:
            await self._http.aclose()
