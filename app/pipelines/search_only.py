"""Search only — web search with a deterministic summary, no generation."""

import logging

from app.orchestrator.schemas import SearchResponse
from app.pipelines.base import SearchProvider
from app.services.normalizer import normalize_search_results, numbered_summary

logger = logging.getLogger(__name__)


class SearchOnlyPipeline:
    def __init__(self, searcher: SearchProvider, max_results: int = 5):
        self.searcher = searcher
        self.max_results = max_results

    async def execute(self, query: str) -> SearchResponse:
        logger.info("Search only | provider=%s | query=%s", self.searcher.name, query[:80])
        raw = await self.searcher.search(query, self.max_results)
        citations = normalize_search_results(raw)
        return SearchResponse(
            summary=numbered_summary(citations, query),
            sources=citations,
            query=query,
        )
