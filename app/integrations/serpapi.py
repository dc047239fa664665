"""SerpAPI Google engine integration.

Docs: https://serpapi.com/search-api
"""

import logging
from typing import Any

from app.integrations.base import ProviderClient

logger = logging.getLogger(__name__)

SEARCH_URL = "https://serpapi.com/search.json"


class SerpApiClient(ProviderClient):
    """Async client for SerpAPI."""

    name = "SerpAPI"

    def __init__(self, api_key: str, engine: str = "google", timeout: float = 30.0):
        super().__init__(timeout)
        self.api_key = api_key
        self.engine = engine

    async def search(self, query: str, max_results: int = 5) -> list[dict[str, Any]]:
        params = {
            "engine": self.engine,
            "q": query,
            "num": str(max_results),
            "api_key": self.api_key,
        }
        data = await self._request_json("GET", SEARCH_URL, params=params)

        if "error" in data and "organic_results" not in data:
            # SerpAPI reports "no results" as an error string with a 200
            if "hasn't returned any results" in str(data["error"]):
                return []
            raise self._malformed(f"error field: {str(data['error'])[:200]}")

        results = data.get("organic_results")
        if not isinstance(results, list):
            raise self._malformed("response has no 'organic_results' list")

        logger.info("SerpAPI results=%d | query=%s", len(results), query[:80])
        return results[:max_results]
