"""Resolution mode selection — which providers answer a query.

The mode is chosen once from configuration (available credentials and the
explicit RESOLUTION_MODE / *_PROVIDER settings), never from request content.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel

from app.config import Settings
from app.errors import ConfigurationError

logger = logging.getLogger(__name__)


class ModeKind(str, Enum):
    DIRECT_GENERATION = "direct_generation"
    SEARCH_THEN_SUMMARIZE = "search_then_summarize"
    SEARCH_ONLY = "search_only"
    DOCUMENT_RETRIEVAL = "document_retrieval"


class ResolutionMode(BaseModel):
    """Tagged variant: the mode plus the provider filling each slot it uses."""

    model_config = {"frozen": True}

    kind: ModeKind
    search_provider: str | None = None
    generation_provider: str | None = None

    @property
    def uses_search(self) -> bool:
        return self.kind in (ModeKind.SEARCH_THEN_SUMMARIZE, ModeKind.SEARCH_ONLY)

    @property
    def uses_generation(self) -> bool:
        return self.kind in (ModeKind.SEARCH_THEN_SUMMARIZE, ModeKind.DIRECT_GENERATION)

    def describe(self) -> str:
        parts = [self.kind.value]
        if self.search_provider:
            parts.append(f"search={self.search_provider}")
        if self.generation_provider:
            parts.append(f"generation={self.generation_provider}")
        return " | ".join(parts)


# Provider name → settings attribute holding its credential, in auto-pick order
SEARCH_CREDENTIALS = {
    "serper": "serper_api_key",
    "serpapi": "serpapi_api_key",
}

GENERATION_CREDENTIALS = {
    "gemini": "gemini_api_key",
    "openai": "openai_api_key",
    "cohere": "cohere_api_key",
    "anthropic": "anthropic_api_key",
}


def select_mode(settings: Settings) -> ResolutionMode:
    """Resolve the configured mode. Raises ConfigurationError if it cannot run."""
    requested = settings.resolution_mode.strip().lower() or "auto"

    search = _pick_provider("search", settings.search_provider, SEARCH_CREDENTIALS, settings)
    generation = _pick_provider("generation", settings.generation_provider, GENERATION_CREDENTIALS, settings)

    if requested == "auto":
        if settings.flowise_url:
            return ResolutionMode(kind=ModeKind.DOCUMENT_RETRIEVAL)
        if search and generation:
            return ResolutionMode(
                kind=ModeKind.SEARCH_THEN_SUMMARIZE,
                search_provider=search,
                generation_provider=generation,
            )
        if search:
            return ResolutionMode(kind=ModeKind.SEARCH_ONLY, search_provider=search)
        if generation:
            return ResolutionMode(kind=ModeKind.DIRECT_GENERATION, generation_provider=generation)
        raise ConfigurationError(
            "No provider credentials configured: set FLOWISE_URL, a search key "
            "(SERPER_API_KEY, SERPAPI_API_KEY) or a generation key "
            "(GEMINI_API_KEY, OPENAI_API_KEY, COHERE_API_KEY, ANTHROPIC_API_KEY)"
        )

    try:
        kind = ModeKind(requested)
    except ValueError:
        raise ConfigurationError(f"Unknown RESOLUTION_MODE '{settings.resolution_mode}'") from None

    if kind == ModeKind.DOCUMENT_RETRIEVAL:
        if not settings.flowise_url:
            raise ConfigurationError("RESOLUTION_MODE=document_retrieval requires FLOWISE_URL")
        return ResolutionMode(kind=kind)

    mode = ResolutionMode(
        kind=kind,
        search_provider=search if kind in (ModeKind.SEARCH_THEN_SUMMARIZE, ModeKind.SEARCH_ONLY) else None,
        generation_provider=generation if kind in (ModeKind.SEARCH_THEN_SUMMARIZE, ModeKind.DIRECT_GENERATION) else None,
    )
    if mode.uses_search and not mode.search_provider:
        raise ConfigurationError(
            f"RESOLUTION_MODE={kind.value} requires SERPER_API_KEY or SERPAPI_API_KEY"
        )
    if mode.uses_generation and not mode.generation_provider:
        raise ConfigurationError(
            f"RESOLUTION_MODE={kind.value} requires GEMINI_API_KEY, OPENAI_API_KEY, "
            "COHERE_API_KEY or ANTHROPIC_API_KEY"
        )
    return mode


def _pick_provider(
    slot: str,
    requested: str,
    credentials: dict[str, str],
    settings: Settings,
) -> str | None:
    """Explicit provider (its key must be set) or the first one with a key."""
    requested = requested.strip().lower() or "auto"

    if requested == "auto":
        for name, attr in credentials.items():
            if getattr(settings, attr):
                return name
        return None

    if requested not in credentials:
        raise ConfigurationError(
            f"Unknown {slot} provider '{requested}' (expected one of: {', '.join(credentials)})"
        )
    attr = credentials[requested]
    if not getattr(settings, attr):
        raise ConfigurationError(f"{slot} provider '{requested}' requires {attr.upper()}")
    return requested
