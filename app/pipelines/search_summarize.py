"""Search then summarize.

Flow: search provider → normalizer → generation provider(query + citations) → summary

If the generation step fails after the search succeeded, the response
degrades to the numbered list of search results instead of failing.
"""

import logging

from app.errors import UpstreamMalformed, UpstreamUnavailable
from app.orchestrator.schemas import SamplingConfig, SearchResponse
from app.pipelines.base import GenerationProvider, SearchProvider
from app.services.llm_client import load_prompt
from app.services.normalizer import build_context, normalize_search_results, numbered_summary

logger = logging.getLogger(__name__)


class SearchSummarizePipeline:
    """Ground the generated answer in live web search results."""

    def __init__(
        self,
        searcher: SearchProvider,
        generator: GenerationProvider,
        sampling: SamplingConfig,
        max_results: int = 5,
    ):
        self.searcher = searcher
        self.generator = generator
        self.sampling = sampling
        self.max_results = max_results
        self.prompt_template = load_prompt("football_summary")

    async def execute(self, query: str) -> SearchResponse:
        logger.info(
            "Search+summarize | search=%s | generation=%s | query=%s",
            self.searcher.name, self.generator.name, query[:80],
        )

        # Step 1: search (failure aborts the request)
        raw = await self.searcher.search(query, self.max_results)
        citations = normalize_search_results(raw)

        # Step 2: summarize (failure degrades to the numbered list)
        prompt = self.prompt_template.format(query=query, context=build_context(citations))
        try:
            summary = await self.generator.generate(prompt, self.sampling)
        except (UpstreamUnavailable, UpstreamMalformed) as e:
            logger.warning(
                "Search+summarize | generation failed, using result list | %s", str(e)[:200],
            )
            summary = numbered_summary(citations, query)

        return SearchResponse(summary=summary, sources=citations, query=query)
