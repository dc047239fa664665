"""Shared request pattern for upstream provider clients.

Every provider makes exactly one attempt per call. Transport failures and
non-success statuses become ``UpstreamUnavailable``; a body that is not a
JSON object becomes ``UpstreamMalformed``. Subclasses pull their own fields
out of the decoded body.
"""

import logging
import time
from typing import Any

import httpx

from app.errors import UpstreamMalformed, UpstreamUnavailable

logger = logging.getLogger(__name__)


class ProviderClient:
    """Base class for external provider clients."""

    name = "provider"

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        start = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.request(method, url, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.warning("%s transport error | %dms | %s", self.name, elapsed_ms, str(e)[:200])
            raise UpstreamUnavailable(f"{self.name} request failed: {e}", provider=self.name) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)

        if not resp.is_success:
            logger.warning(
                "%s error | status=%d | %dms | %s",
                self.name, resp.status_code, elapsed_ms, resp.text[:300],
            )
            raise UpstreamUnavailable(
                f"{self.name} returned status {resp.status_code}", provider=self.name,
            )

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("%s returned non-JSON body | %dms", self.name, elapsed_ms)
            raise UpstreamMalformed(f"{self.name} returned non-JSON body", provider=self.name) from e

        if not isinstance(data, dict):
            raise UpstreamMalformed(f"{self.name} returned {type(data).__name__}, expected object", provider=self.name)

        logger.info("%s OK | status=%d | %dms", self.name, resp.status_code, elapsed_ms)
        return data

    def _malformed(self, detail: str) -> UpstreamMalformed:
        logger.warning("%s malformed response | %s", self.name, detail)
        return UpstreamMalformed(f"{self.name}: {detail}", provider=self.name)
