"""Document retrieval — a RAG endpoint returns both answer and sources."""

import logging

from app.orchestrator.schemas import SearchResponse
from app.pipelines.base import RetrievalProvider
from app.services.normalizer import extract_answer, normalize_documents

logger = logging.getLogger(__name__)


class DocumentRetrievalPipeline:
    """Pass the retrieval endpoint's answer and documents through."""

    def __init__(self, retriever: RetrievalProvider):
        self.retriever = retriever

    async def execute(self, query: str) -> SearchResponse:
        logger.info("Document retrieval | provider=%s | query=%s", self.retriever.name, query[:80])
        payload = await self.retriever.retrieve(query)
        return SearchResponse(
            summary=extract_answer(payload),
            sources=normalize_documents(payload),
            query=query,
        )
