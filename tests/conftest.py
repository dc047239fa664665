"""Shared test fixtures and configuration."""

import os

import pytest

# No real credentials or database during tests
for _var in (
    "SERPER_API_KEY", "SERPAPI_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY",
    "COHERE_API_KEY", "ANTHROPIC_API_KEY", "FLOWISE_URL", "DATABASE_URL",
    "SUPABASE_URL", "SUPABASE_ANON_KEY",
):
    os.environ[_var] = ""
os.environ["RESOLUTION_MODE"] = "auto"

from app.config import Settings  # noqa: E402
from app.errors import UpstreamMalformed, UpstreamUnavailable  # noqa: E402


@pytest.fixture
def make_settings():
    """Build Settings from keyword overrides, ignoring any .env file."""
    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)
    return _make


# ═══════════════ FAKE PROVIDERS ═══════════════


class FakeSearch:
    """Search provider returning canned results and recording calls."""

    name = "FakeSearch"

    def __init__(self, results=None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def search(self, query, max_results=5):
        self.calls.append((query, max_results))
        if self.error:
            raise self.error
        return self.results[:max_results]


class FakeGenerator:
    name = "FakeGenerator"

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt, sampling):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text


class FakeRetriever:
    name = "FakeRetriever"

    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = payload or {}
        self.error = error
        self.questions: list[str] = []

    async def retrieve(self, question):
        self.questions.append(question)
        if self.error:
            raise self.error
        return self.payload


@pytest.fixture
def fake_search():
    return FakeSearch


@pytest.fixture
def fake_generator():
    return FakeGenerator


@pytest.fixture
def fake_retriever():
    return FakeRetriever


@pytest.fixture
def upstream_down():
    return UpstreamUnavailable("generation returned status 503", provider="FakeGenerator")


@pytest.fixture
def upstream_garbled():
    return UpstreamMalformed("no candidates", provider="FakeGenerator")


# ═══════════════ SAMPLE PROVIDER PAYLOADS ═══════════════


@pytest.fixture
def three_results():
    """Three web-search results in Serper/SerpAPI shape."""
    return [
        {"title": "Arsenal 3-1 Spurs", "link": "https://example.com/a", "snippet": "Derby report"},
        {"title": "Saka double", "link": "https://example.com/b", "snippet": "Saka scores twice"},
        {"title": "Table update", "link": "https://example.com/c", "snippet": "Arsenal go top"},
    ]


@pytest.fixture
def sample_serper_response():
    return {
        "searchParameters": {"q": "Chelsea vs Arsenal", "type": "search"},
        "organic": [
            {
                "title": "Chelsea 2-1 Arsenal",
                "link": "https://example.com/1",
                "snippet": "Match report",
                "position": 1,
            },
        ],
    }


@pytest.fixture
def sample_serpapi_response():
    return {
        "search_metadata": {"status": "Success"},
        "organic_results": [
            {
                "position": 1,
                "title": "Premier League table",
                "link": "https://example.com/table",
                "snippet": "Latest standings",
            },
            {
                "position": 2,
                "title": "Fixtures",
                "link": "https://example.com/fixtures",
            },
        ],
    }


@pytest.fixture
def sample_gemini_response():
    return {
        "candidates": [
            {
                "content": {"parts": [{"text": "Chelsea beat Arsenal 2-1."}], "role": "model"},
                "finishReason": "STOP",
            },
        ],
    }


@pytest.fixture
def sample_openai_response():
    return {
        "id": "chatcmpl-1",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": "Messi won in 2022."}},
        ],
    }


@pytest.fixture
def sample_cohere_response():
    return {"id": "gen-1", "generations": [{"id": "g1", "text": "  Real Madrid hold the record.  "}]}


@pytest.fixture
def sample_flowise_response():
    return {
        "text": "Liverpool won the 2019 final.",
        "sourceDocuments": [
            {
                "pageContent": "Liverpool beat Tottenham 2-0 in Madrid.",
                "metadata": {"source": "https://example.com/ucl-2019", "title": "UCL 2019 final"},
            },
        ],
    }
