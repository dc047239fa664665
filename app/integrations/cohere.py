"""Cohere Generate integration.

Docs: https://docs.cohere.com/reference/generate
"""

import logging

from app.integrations.base import ProviderClient
from app.orchestrator.schemas import SamplingConfig

logger = logging.getLogger(__name__)

GENERATE_URL = "https://api.cohere.ai/v1/generate"


class CohereClient(ProviderClient):
    name = "Cohere"

    def __init__(self, api_key: str, model: str = "command", timeout: float = 30.0):
        super().__init__(timeout)
        self.api_key = api_key
        self.model = model

    async def generate(self, prompt: str, sampling: SamplingConfig) -> str:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "max_tokens": sampling.max_output_tokens,
            "temperature": sampling.temperature,
            "k": min(sampling.top_k, 500),
            "p": min(sampling.top_p, 0.99),
        }
        data = await self._request_json(
            "POST",
            GENERATE_URL,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

        generations = data.get("generations")
        if not isinstance(generations, list) or not generations:
            raise self._malformed("no generations")
        if not isinstance(generations[0], dict):
            raise self._malformed("generation is not an object")
        text = generations[0].get("text")
        if not isinstance(text, str) or not text.strip():
            raise self._malformed("generation has no text")
        return text.strip()
