"""
AI SEO suggestion client.

Talks to an OpenAI-compatible ``/chat/completions`` endpoint over httpx and
asks for a strict JSON-schema response. No retries happen here; callers see
the provider outcome once.
"""
import json
import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from ..config import (
    AI_MAX_TOKENS, AI_MODEL, AI_TEMPERATURE, AI_TIMEOUT_SECONDS, OPENAI_API_KEY, OPENAI_BASE_URL,
)
from ..errors import ProviderAuthError, ProviderError, ProviderRateLimitError

logger = logging.getLogger(__name__)

AVAILABLE_MODELS = {
    "gpt-4o": "Most capable model, best for complex tasks",
    "gpt-4o-mini": "Fast and affordable, great for most tasks",
    "gpt-4-turbo": "High performance, balanced speed and capability",
    "gpt-4": "Previous generation flagship model",
    "gpt-3.5-turbo": "Fast and cost-effective for simple tasks",
}

CONTENT_EXCERPT_CHARS = 1000

SEO_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "seo_suggestion",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "metaTitle": {"type": "string"},
                "metaDescription": {"type": "string"},
                "keywords": {"type": "array", "items": {"type": "string"}},
                "suggestions": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["metaTitle", "metaDescription", "keywords", "suggestions"],
            "additionalProperties": False,
        },
    },
}


class SeoSuggestion(BaseModel):
    metaTitle: str
    metaDescription: str
    keywords: List[str]
    suggestions: List[str]


def build_seo_prompt(target_keywords: Optional[List[str]] = None, business_type: Optional[str] = None) -> str:
    lines = [
        "You are an expert SEO specialist. Analyze the content and create optimized SEO metadata.",
        "",
        "Guidelines:",
        "- Meta title: Max 60 characters, engaging and keyword-rich",
        "- Meta description: Max 160 characters, compelling and informative",
        "- Keywords: Relevant and specific to the content",
    ]
    if business_type:
        lines.append(f"- Business type: {business_type}")
    if target_keywords:
        lines.append(f"- Target keywords: {', '.join(target_keywords)}")
    lines += ["", "Provide structured SEO recommendations."]
    return "\n".join(lines)


class AIService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = OPENAI_API_KEY if api_key is None else api_key
        self.base_url = (base_url or OPENAI_BASE_URL).rstrip("/")
        self.default_model = default_model or AI_MODEL
        self.timeout = timeout or AI_TIMEOUT_SECONDS
        self._transport = transport

    def get_default_model(self) -> str:
        return self.default_model

    def get_available_models(self) -> List[str]:
        return list(AVAILABLE_MODELS)

    async def _chat(self, body: dict) -> dict:
        if not self.api_key:
            raise ProviderAuthError("OPENAI_API_KEY is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(f"{self.base_url}/chat/completions", json=body, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(f"AI provider request failed: {e}") from e

        if r.status_code == 401:
            raise ProviderAuthError("AI provider rejected the API key", status_code=401)
        if r.status_code == 429:
            raise ProviderRateLimitError("AI provider rate limit exceeded", retry_after=r.headers.get("retry-after"))
        if r.status_code >= 400:
            raise ProviderError(f"AI provider returned HTTP {r.status_code}", status_code=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise ProviderError("AI provider returned a malformed response") from e

    async def enhance_seo(
        self,
        content: str,
        current_title: str,
        target_keywords: Optional[List[str]] = None,
        business_type: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> SeoSuggestion:
        """Ask the provider for SEO metadata suggestions for ``content``"""
        model = model or self.default_model
        body = {
            "model": model,
            "messages": [
                {"role": "system", "content": build_seo_prompt(target_keywords, business_type)},
                {
                    "role": "user",
                    "content": f"Current Title: {current_title}\n\nContent:\n{content[:CONTENT_EXCERPT_CHARS]}",
                },
            ],
            "response_format": SEO_RESPONSE_FORMAT,
            "temperature": AI_TEMPERATURE if temperature is None else temperature,
            "max_tokens": max_tokens or AI_MAX_TOKENS,
        }
        payload = await self._chat(body)

        try:
            raw = payload["choices"][0]["message"]["content"]
            suggestion = SeoSuggestion.model_validate(json.loads(raw))
        except (KeyError, IndexError, TypeError, json.JSONDecodeError, ValidationError) as e:
            logger.error("Failed to parse AI response: %s", e)
            raise ProviderError("Failed to parse AI response") from e

        logger.info("SEO suggestion generated", extra={"model": model, "keyword_count": len(suggestion.keywords)})
        return suggestion


_service: Optional[AIService] = None


def get_ai_service() -> AIService:
    """FastAPI dependency returning the shared AI client"""
    global _service
    if _service is None:
        _service = AIService()
    return _service
