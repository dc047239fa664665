"""Pydantic models for API input/output — shared across all pipelines.

Split into: request, provider settings, and final API response.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ═══════════════ REQUEST ═══════════════

class ClientMetadata(BaseModel):
    ip_address: str = ""
    user_agent: str = ""


class SearchRequest(BaseModel):
    """A single query from the frontend plus who is asking.

    Exactly one of ``requester_identity`` / ``session_id`` is meaningful:
    authenticated requests carry the user id, anonymous ones a fresh session.
    """

    query: str = ""
    requester_identity: str | None = None
    session_id: str | None = None
    client: ClientMetadata = Field(default_factory=ClientMetadata)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.requester_identity)


# ═══════════════ PROVIDER SETTINGS ═══════════════

class SamplingConfig(BaseModel):
    """Generation parameters; each provider maps the fields it supports."""
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 1024


# ═══════════════ FINAL API RESPONSE ═══════════════

class SourceCitation(BaseModel):
    """Single source shown to the user next to the summary."""
    title: str = ""
    url: str = ""
    snippet: str = ""


class SearchResponse(BaseModel):
    """Final response sent to the frontend."""
    summary: str = ""
    sources: list[SourceCitation] = Field(default_factory=list)
    query: str = ""


class HistoryEntry(BaseModel):
    query: str
    created_at: str
