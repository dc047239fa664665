"""History recorder — best-effort persistence of completed searches.

Two independent writes per request:
  - search_history: every request, keyed by user id or anonymous session
  - user_search_history: only when the requester is authenticated

Write failures are logged and swallowed; they never reach the HTTP response.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.errors import PersistenceFailure
from app.models.search_history import SearchHistory, UserSearchHistory
from app.orchestrator.schemas import ClientMetadata, HistoryEntry, SearchRequest, SearchResponse

logger = logging.getLogger(__name__)


class HistoryRecorder:
    """Append-only sink for search history."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None):
        self.session_factory = session_factory

    @property
    def enabled(self) -> bool:
        return self.session_factory is not None

    async def record_exchange(self, request: SearchRequest, response: SearchResponse) -> None:
        """Background-task entry point: persist one request/response pair."""
        await self.record(
            user_id=request.requester_identity,
            session_id=request.session_id,
            query=response.query,
            summary=response.summary,
            sources=[s.model_dump() for s in response.sources],
            client=request.client,
        )

    async def record(
        self,
        *,
        user_id: str | None,
        session_id: str | None,
        query: str,
        summary: str,
        sources: list[dict],
        client: ClientMetadata,
    ) -> None:
        if not self.enabled:
            logger.debug("Search history skipped — database disabled")
            return

        await self._write(
            "search_history",
            SearchHistory(
                user_id=user_id,
                session_id=None if user_id else session_id,
                query=query,
                summary=summary,
                sources=sources,
                ip_address=client.ip_address,
                user_agent=client.user_agent,
            ),
        )

        if user_id:
            await self._write(
                "user_search_history",
                UserSearchHistory(
                    user_id=user_id,
                    query=query,
                    summary=summary,
                    sources=sources,
                ),
            )

    async def _write(self, table: str, record) -> None:
        try:
            async with self.session_factory() as session:
                session.add(record)
                await session.commit()
            logger.info("History saved | table=%s", table)
        except Exception as e:
            logger.warning("History write failed | table=%s | %s", table, str(e)[:200])

    async def recent_queries(self, user_id: str, limit: int = 10) -> list[HistoryEntry]:
        """Most recent queries of one user, newest first."""
        if not self.enabled:
            return []

        stmt = (
            select(UserSearchHistory.query, UserSearchHistory.created_at)
            .where(UserSearchHistory.user_id == user_id)
            .order_by(UserSearchHistory.created_at.desc())
            .limit(limit)
        )
        try:
            async with self.session_factory() as session:
                rows = (await session.execute(stmt)).all()
        except Exception as e:
            logger.error("History read failed | user=%s | %s", user_id, str(e)[:200])
            raise PersistenceFailure(f"History read failed: {e}") from e

        return [
            HistoryEntry(query=row.query, created_at=row.created_at.isoformat())
            for row in rows
        ]


def get_history_recorder() -> HistoryRecorder:
    """FastAPI dependency — recorder bound to the configured database."""
    from app import database

    return HistoryRecorder(database.async_session_factory)
