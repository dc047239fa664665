"""Async Anthropic API wrapper and prompt template loading."""

import logging
import time
from pathlib import Path

import anthropic
import httpx

from app.errors import UpstreamMalformed, UpstreamUnavailable
from app.orchestrator.schemas import SamplingConfig

logger = logging.getLogger(__name__)


def load_prompt(name: str) -> str:
    """Load a prompt template from app/prompts/{name}.txt."""
    prompt_path = Path(__file__).parent.parent / "prompts" / f"{name}.txt"
    return prompt_path.read_text(encoding="utf-8")


class AnthropicClient:
    """Generation provider backed by the Claude Messages API.

    The SDK client is created lazily and with ``max_retries=0``: one attempt
    per call, like every other provider.
    """

    name = "Anthropic"

    def __init__(self, api_key: str, model: str, timeout: float = 30.0):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client: anthropic.AsyncAnthropic | None = None

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                max_retries=0,
            )
        return self._client

    async def generate(self, prompt: str, sampling: SamplingConfig) -> str:
        client = self._get_client()
        start = time.monotonic()
        try:
            response = await client.messages.create(
                model=self.model,
                max_tokens=sampling.max_output_tokens,
                temperature=sampling.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIStatusError as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.warning(
                "LLM error | model=%s | status=%d | %dms | %s",
                self.model, e.status_code, elapsed_ms, str(e)[:200],
            )
            raise UpstreamUnavailable(f"Anthropic returned status {e.status_code}", provider=self.name) from e
        except (anthropic.APITimeoutError, anthropic.APIConnectionError) as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.warning("LLM connection error | model=%s | %dms", self.model, elapsed_ms)
            raise UpstreamUnavailable(f"Anthropic request failed: {e}", provider=self.name) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        text = "".join(
            block.text for block in (response.content or []) if getattr(block, "type", "") == "text"
        )
        if not text.strip():
            raise UpstreamMalformed("Anthropic response has no text content", provider=self.name)

        usage = response.usage
        logger.info(
            "LLM OK | model=%s | tokens_in=%d tokens_out=%d | %dms",
            self.model, usage.input_tokens, usage.output_tokens, elapsed_ms,
        )
        return text
