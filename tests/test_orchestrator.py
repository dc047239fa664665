"""Tests for the query gateway — validation, dispatch and provider wiring."""

import pytest

from app.errors import ConfigurationError, InvalidInput, UpstreamUnavailable
from app.integrations.cohere import CohereClient
from app.integrations.flowise import FlowiseClient
from app.integrations.gemini import GeminiClient
from app.integrations.serpapi import SerpApiClient
from app.integrations.serper import SerperClient
from app.orchestrator.gateway import (
    QueryGateway,
    build_generation_provider,
    build_sampling,
    build_search_provider,
    validate_query,
)
from app.orchestrator.modes import ModeKind, ResolutionMode
from app.orchestrator.schemas import SearchRequest, SearchResponse, SourceCitation
from app.pipelines.direct_generation import DirectGenerationPipeline
from app.pipelines.document_retrieval import DocumentRetrievalPipeline
from app.pipelines.search_only import SearchOnlyPipeline
from app.pipelines.search_summarize import SearchSummarizePipeline
from app.services.llm_client import AnthropicClient


class RecordingPipeline:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.queries = []

    async def execute(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.response


def _gateway(pipeline) -> QueryGateway:
    return QueryGateway(ResolutionMode(kind=ModeKind.SEARCH_ONLY, search_provider="serper"), pipeline)


# ═══════════════ Input validation ═══════════════


class TestValidateQuery:
    def test_strips_whitespace(self):
        assert validate_query("  Chelsea vs Arsenal \n") == "Chelsea vs Arsenal"

    @pytest.mark.parametrize("query", ["", "   ", "\t\n", None, 42, ["Chelsea"]])
    def test_rejects_empty_or_non_string(self, query):
        with pytest.raises(InvalidInput) as exc_info:
            validate_query(query)
        assert exc_info.value.status_code == 400
        assert exc_info.value.to_dict() == {"error": "Query is required"}


# ═══════════════ Resolve ═══════════════


class TestQueryGateway:
    @pytest.mark.asyncio
    async def test_resolve_dispatches_trimmed_query(self):
        response = SearchResponse(
            summary="Arsenal top the table.",
            sources=[SourceCitation(title="Table", url="https://e/t", snippet="s")],
            query="Arsenal",
        )
        pipeline = RecordingPipeline(response)

        result = await _gateway(pipeline).resolve(SearchRequest(query="  Arsenal  "))

        assert pipeline.queries == ["Arsenal"]
        assert result.summary == "Arsenal top the table."
        assert result.query == "Arsenal"

    @pytest.mark.asyncio
    async def test_invalid_query_makes_no_calls(self):
        pipeline = RecordingPipeline(SearchResponse())
        with pytest.raises(InvalidInput):
            await _gateway(pipeline).resolve(SearchRequest(query="   "))
        assert pipeline.queries == []

    @pytest.mark.asyncio
    async def test_query_echo_enforced(self):
        pipeline = RecordingPipeline(SearchResponse(summary="x", sources=[], query="something else"))
        result = await _gateway(pipeline).resolve(SearchRequest(query="Spurs"))
        assert result.query == "Spurs"

    @pytest.mark.asyncio
    async def test_pipeline_error_propagates(self):
        pipeline = RecordingPipeline(error=UpstreamUnavailable("down", provider="Serper"))
        with pytest.raises(UpstreamUnavailable):
            await _gateway(pipeline).resolve(SearchRequest(query="q"))


# ═══════════════ Wiring from settings ═══════════════


class TestFromSettings:
    def test_search_then_summarize(self, make_settings):
        gateway = QueryGateway.from_settings(make_settings(serper_api_key="s", gemini_api_key="g"))
        assert isinstance(gateway.pipeline, SearchSummarizePipeline)
        assert isinstance(gateway.pipeline.searcher, SerperClient)
        assert isinstance(gateway.pipeline.generator, GeminiClient)
        assert gateway.pipeline.max_results == 5

    def test_search_only(self, make_settings):
        gateway = QueryGateway.from_settings(make_settings(serpapi_api_key="p", max_search_results=50))
        assert isinstance(gateway.pipeline, SearchOnlyPipeline)
        assert isinstance(gateway.pipeline.searcher, SerpApiClient)
        assert gateway.pipeline.max_results == 10

    def test_direct_generation(self, make_settings):
        gateway = QueryGateway.from_settings(make_settings(cohere_api_key="c"))
        assert isinstance(gateway.pipeline, DirectGenerationPipeline)
        assert isinstance(gateway.pipeline.generator, CohereClient)

    def test_document_retrieval(self, make_settings):
        gateway = QueryGateway.from_settings(make_settings(flowise_url="https://fw.example.com/api/v1/prediction/x"))
        assert isinstance(gateway.pipeline, DocumentRetrievalPipeline)
        assert isinstance(gateway.pipeline.retriever, FlowiseClient)

    def test_nothing_configured(self, make_settings):
        with pytest.raises(ConfigurationError):
            QueryGateway.from_settings(make_settings())

    def test_sampling_from_settings(self, make_settings):
        sampling = build_sampling(make_settings(llm_temperature=0.2, llm_max_output_tokens=300))
        assert sampling.temperature == 0.2
        assert sampling.max_output_tokens == 300
        assert sampling.top_k == 40
        assert sampling.top_p == 0.95


class TestProviderFactories:
    def test_anthropic_generation_provider(self, make_settings):
        provider = build_generation_provider("anthropic", make_settings(anthropic_api_key="a"))
        assert isinstance(provider, AnthropicClient)

    def test_unknown_generation_provider(self, make_settings):
        with pytest.raises(ConfigurationError):
            build_generation_provider("llama", make_settings())

    def test_unknown_search_provider(self, make_settings):
        with pytest.raises(ConfigurationError):
            build_search_provider("bing", make_settings())
