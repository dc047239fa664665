"""Serper Google Search API integration.

Docs: https://serper.dev/
"""

import logging
from typing import Any

from app.integrations.base import ProviderClient

logger = logging.getLogger(__name__)

SEARCH_URL = "https://google.serper.dev/search"


class SerperClient(ProviderClient):
    """Async client for the Serper web search API."""

    name = "Serper"

    def __init__(self, api_key: str, timeout: float = 30.0):
        super().__init__(timeout)
        self.api_key = api_key

    async def search(self, query: str, max_results: int = 5) -> list[dict[str, Any]]:
        """Return the raw organic results, at most ``max_results``."""
        data = await self._request_json(
            "POST",
            SEARCH_URL,
            json={"q": query, "num": max_results},
            headers={"X-API-KEY": self.api_key, "Content-Type": "application/json"},
        )
        organic = data.get("organic")
        if not isinstance(organic, list):
            raise self._malformed("response has no 'organic' list")

        logger.info("Serper results=%d | query=%s", len(organic), query[:80])
        return organic[:max_results]
