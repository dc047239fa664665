"""Flowise prediction endpoint (retrieval-augmented generation).

The endpoint answers from its own document store and returns the answer
together with the documents it used.
"""

import logging
from typing import Any

from app.integrations.base import ProviderClient

logger = logging.getLogger(__name__)


class FlowiseClient(ProviderClient):
    """Async client for a single Flowise chatflow prediction URL."""

    name = "Flowise"

    def __init__(self, url: str, api_key: str = "", timeout: float = 30.0):
        super().__init__(timeout)
        self.url = url
        self.api_key = api_key

    async def retrieve(self, question: str) -> dict[str, Any]:
        """Return the raw prediction body: answer text plus source documents."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        data = await self._request_json("POST", self.url, json={"question": question}, headers=headers)
        if not any(data.get(key) for key in ("text", "answer", "result")):
            logger.warning("Flowise prediction has no answer text | question=%s", question[:80])

        documents = data.get("sourceDocuments") or data.get("sources")
        logger.info(
            "Flowise prediction | documents=%d | question=%s",
            len(documents) if isinstance(documents, list) else 0, question[:80],
        )
        return data
