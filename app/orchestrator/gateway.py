"""Query resolution gateway — validates a query and runs the configured mode.

Responsibilities:
  - Validate input (non-empty after trimming)
  - Dispatch to the pipeline of the configured resolution mode
  - Enforce the response envelope guarantees
"""

import logging
import time

from app.config import Settings
from app.errors import ConfigurationError, InvalidInput
from app.integrations.cohere import CohereClient
from app.integrations.flowise import FlowiseClient
from app.integrations.gemini import GeminiClient
from app.integrations.openai_chat import OpenAIChatClient
from app.integrations.serpapi import SerpApiClient
from app.integrations.serper import SerperClient
from app.orchestrator.modes import ModeKind, ResolutionMode, select_mode
from app.orchestrator.schemas import SamplingConfig, SearchRequest, SearchResponse
from app.pipelines.base import GenerationProvider, ResolutionPipeline, SearchProvider
from app.pipelines.direct_generation import DirectGenerationPipeline
from app.pipelines.document_retrieval import DocumentRetrievalPipeline
from app.pipelines.search_only import SearchOnlyPipeline
from app.pipelines.search_summarize import SearchSummarizePipeline
from app.services import response_guard
from app.services.llm_client import AnthropicClient

logger = logging.getLogger(__name__)


class QueryGateway:
    """Single entry point for resolving a search request."""

    def __init__(self, mode: ResolutionMode, pipeline: ResolutionPipeline):
        self.mode = mode
        self.pipeline = pipeline

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueryGateway":
        mode = select_mode(settings)
        pipeline = build_pipeline(mode, settings)
        logger.info("Gateway ready | mode=%s", mode.describe())
        return cls(mode, pipeline)

    async def resolve(self, request: SearchRequest) -> SearchResponse:
        query = validate_query(request.query)

        start = time.monotonic()
        response = await self.pipeline.execute(query)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        logger.info(
            "Query resolved | mode=%s | sources=%d | %dms",
            self.mode.kind.value, len(response.sources), elapsed_ms,
        )
        return response_guard.validate(response, query)


def validate_query(query) -> str:
    if not isinstance(query, str) or not query.strip():
        raise InvalidInput("Empty or missing query")
    return query.strip()


# ═══════════════ PROVIDER WIRING ═══════════════

def build_search_provider(name: str, settings: Settings) -> SearchProvider:
    timeout = settings.http_timeout_seconds
    if name == "serper":
        return SerperClient(settings.serper_api_key, timeout=timeout)
    if name == "serpapi":
        return SerpApiClient(settings.serpapi_api_key, timeout=timeout)
    raise ConfigurationError(f"Unknown search provider '{name}'")


def build_generation_provider(name: str, settings: Settings) -> GenerationProvider:
    timeout = settings.http_timeout_seconds
    if name == "gemini":
        return GeminiClient(settings.gemini_api_key, settings.gemini_model, timeout=timeout)
    if name == "openai":
        return OpenAIChatClient(settings.openai_api_key, settings.openai_model, timeout=timeout)
    if name == "cohere":
        return CohereClient(settings.cohere_api_key, settings.cohere_model, timeout=timeout)
    if name == "anthropic":
        return AnthropicClient(settings.anthropic_api_key, settings.anthropic_model, timeout=timeout)
    raise ConfigurationError(f"Unknown generation provider '{name}'")


def build_sampling(settings: Settings) -> SamplingConfig:
    return SamplingConfig(
        temperature=settings.llm_temperature,
        top_k=settings.llm_top_k,
        top_p=settings.llm_top_p,
        max_output_tokens=settings.llm_max_output_tokens,
    )


def build_pipeline(mode: ResolutionMode, settings: Settings) -> ResolutionPipeline:
    if mode.kind == ModeKind.DOCUMENT_RETRIEVAL:
        return DocumentRetrievalPipeline(
            FlowiseClient(settings.flowise_url, settings.flowise_api_key, timeout=settings.http_timeout_seconds),
        )
    if mode.kind == ModeKind.SEARCH_ONLY:
        return SearchOnlyPipeline(
            build_search_provider(mode.search_provider, settings),
            max_results=settings.search_result_limit,
        )
    if mode.kind == ModeKind.DIRECT_GENERATION:
        return DirectGenerationPipeline(
            build_generation_provider(mode.generation_provider, settings),
            build_sampling(settings),
        )
    return SearchSummarizePipeline(
        build_search_provider(mode.search_provider, settings),
        build_generation_provider(mode.generation_provider, settings),
        build_sampling(settings),
        max_results=settings.search_result_limit,
    )
