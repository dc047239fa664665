"""Direct generation — one LLM call, placeholder sources.

Flow: prompt(query) → generation provider → summary
"""

import logging

from app.orchestrator.schemas import SamplingConfig, SearchResponse
from app.pipelines.base import GenerationProvider
from app.services.llm_client import load_prompt
from app.services.normalizer import placeholder_citations

logger = logging.getLogger(__name__)


class DirectGenerationPipeline:
    """Answer the query from the model's own knowledge."""

    def __init__(self, generator: GenerationProvider, sampling: SamplingConfig):
        self.generator = generator
        self.sampling = sampling
        self.prompt_template = load_prompt("football_answer")

    async def execute(self, query: str) -> SearchResponse:
        logger.info("Direct generation | provider=%s | query=%s", self.generator.name, query[:80])
        prompt = self.prompt_template.format(query=query)

        # No search results to fall back on: provider errors propagate
        summary = await self.generator.generate(prompt, self.sampling)

        return SearchResponse(
            summary=summary,
            sources=placeholder_citations(),
            query=query,
        )
