"""Tests for shared services — response guard, requester identity."""

import httpx
import pytest

from app.orchestrator.schemas import SearchResponse, SourceCitation
from app.services.identity import IdentityResolver, bearer_token, new_session_id
from app.services.response_guard import validate

SUPABASE_URL = "https://proj.supabase.co"


# ═══════════════ Response Guard ═══════════════


class TestResponseGuard:
    def test_passes_valid_response(self):
        resp = SearchResponse(
            summary="Arsenal won.",
            sources=[SourceCitation(title="T", url="https://e", snippet="S")],
            query="Arsenal",
        )
        validated = validate(resp, "Arsenal")
        assert validated.summary == "Arsenal won."
        assert len(validated.sources) == 1

    def test_echoes_query(self):
        resp = SearchResponse(summary="x", sources=[], query="")
        assert validate(resp, "Chelsea vs Arsenal").query == "Chelsea vs Arsenal"

    def test_empty_summary_allowed(self):
        """Should log a warning (not raise) for an empty summary."""
        validated = validate(SearchResponse(summary="", sources=[], query="q"), "q")
        assert validated.summary == ""
        assert validated.sources == []


# ═══════════════ Identity ═══════════════


class TestBearerToken:
    def test_extracts_token(self):
        assert bearer_token("Bearer abc.def") == "abc.def"
        assert bearer_token("bearer abc") == "abc"

    def test_missing_or_other_scheme(self):
        assert bearer_token(None) == ""
        assert bearer_token("") == ""
        assert bearer_token("Basic dXNlcg==") == ""

    def test_session_ids_unique(self):
        assert new_session_id() != new_session_id()


class TestIdentityResolver:
    @pytest.mark.asyncio
    async def test_resolves_user(self, httpx_mock):
        httpx_mock.add_response(url=f"{SUPABASE_URL}/auth/v1/user", method="GET", json={"id": "user-123"})
        resolver = IdentityResolver(SUPABASE_URL, "anon-key")

        assert await resolver.resolve("Bearer user-jwt") == "user-123"
        request = httpx_mock.get_request()
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer user-jwt"

    @pytest.mark.asyncio
    async def test_anon_key_is_anonymous(self, httpx_mock):
        resolver = IdentityResolver(SUPABASE_URL, "anon-key")
        assert await resolver.resolve("Bearer anon-key") is None
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_no_header_is_anonymous(self, httpx_mock):
        assert await IdentityResolver(SUPABASE_URL, "anon-key").resolve(None) is None
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_disabled_without_config(self, httpx_mock):
        resolver = IdentityResolver("", "")
        assert resolver.enabled is False
        assert await resolver.resolve("Bearer user-jwt") is None
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_rejected_token(self, httpx_mock):
        httpx_mock.add_response(status_code=401, json={"msg": "invalid JWT"})
        assert await IdentityResolver(SUPABASE_URL, "anon-key").resolve("Bearer expired") is None

    @pytest.mark.asyncio
    async def test_response_without_id(self, httpx_mock):
        httpx_mock.add_response(json={"email": "fan@example.com"})
        assert await IdentityResolver(SUPABASE_URL, "anon-key").resolve("Bearer t") is None

    @pytest.mark.asyncio
    async def test_transport_error_is_anonymous(self, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectTimeout("timeout"))
        assert await IdentityResolver(SUPABASE_URL, "anon-key").resolve("Bearer t") is None
