"""Provider interfaces shared by the resolution pipelines."""

from typing import Any, Protocol

from app.orchestrator.schemas import SamplingConfig, SearchResponse


class SearchProvider(Protocol):
    name: str

    async def search(self, query: str, max_results: int = 5) -> list[dict[str, Any]]: ...


class GenerationProvider(Protocol):
    name: str

    async def generate(self, prompt: str, sampling: SamplingConfig) -> str: ...


class RetrievalProvider(Protocol):
    name: str

    async def retrieve(self, question: str) -> dict[str, Any]: ...


class ResolutionPipeline(Protocol):
    async def execute(self, query: str) -> SearchResponse: ...
