"""OpenAI Chat Completions integration.

Docs: https://platform.openai.com/docs/api-reference/chat
"""

import logging

from app.integrations.base import ProviderClient
from app.orchestrator.schemas import SamplingConfig

logger = logging.getLogger(__name__)

COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIChatClient(ProviderClient):
    name = "OpenAI"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30.0):
        super().__init__(timeout)
        self.api_key = api_key
        self.model = model

    async def generate(self, prompt: str, sampling: SamplingConfig) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": sampling.temperature,
            "top_p": sampling.top_p,
            "max_tokens": sampling.max_output_tokens,
        }
        data = await self._request_json(
            "POST",
            COMPLETIONS_URL,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise self._malformed("no choices")
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise self._malformed("choice has no message")
        content = message.get("content")
        if not isinstance(content, str) or not content.strip():
            raise self._malformed("choice has no message content")
        return content
