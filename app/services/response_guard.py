"""Output guard.

Validates the final envelope before it is sent to the user:
- summary is a string (empty is allowed but logged as anomalous)
- sources is a list
- query echoes the input
"""

import logging

from app.orchestrator.schemas import SearchResponse

logger = logging.getLogger(__name__)


def validate(response: SearchResponse, query: str) -> SearchResponse:
    """Validate and fix the response before sending to user."""
    if response.summary is None:
        response.summary = ""
    if not response.summary.strip():
        logger.warning("Guard WARNING: empty summary for query '%s'", query[:80])

    if response.sources is None:
        response.sources = []

    if response.query != query:
        response.query = query

    return response
