"""Google Gemini generateContent integration.

Docs: https://ai.google.dev/api/generate-content
"""

import logging

from app.integrations.base import ProviderClient
from app.orchestrator.schemas import SamplingConfig

logger = logging.getLogger(__name__)

BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient(ProviderClient):
    """Async client for the Gemini REST API."""

    name = "Gemini"

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash", timeout: float = 30.0):
        super().__init__(timeout)
        self.api_key = api_key
        self.model = model

    async def generate(self, prompt: str, sampling: SamplingConfig) -> str:
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": sampling.temperature,
                "topK": sampling.top_k,
                "topP": sampling.top_p,
                "maxOutputTokens": sampling.max_output_tokens,
            },
        }
        data = await self._request_json(
            "POST",
            f"{BASE_URL}/{self.model}:generateContent",
            params={"key": self.api_key},
            json=payload,
        )
        return self._parse_text(data)

    def _parse_text(self, data: dict) -> str:
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise self._malformed("no candidates")
        candidate = candidates[0]
        if not isinstance(candidate, dict):
            raise self._malformed("candidate is not an object")
        content = candidate.get("content")
        if not isinstance(content, dict):
            raise self._malformed("candidate has no content")
        parts = content.get("parts")
        if not isinstance(parts, list):
            raise self._malformed("content has no parts")
        texts = [p.get("text", "") for p in parts if isinstance(p, dict)]
        text = "".join(t for t in texts if isinstance(t, str))
        if not text.strip():
            raise self._malformed("candidate has no text")
        return text
