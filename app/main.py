"""Footy Search Backend — FastAPI application entry point.

Provides the search endpoint used by the frontend: a football query in,
``{summary, sources, query}`` out.
"""

import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import BackgroundTasks, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from app.config import settings
from app.errors import ConfigurationError, GatewayError
from app.orchestrator.gateway import QueryGateway, validate_query
from app.orchestrator.schemas import ClientMetadata, SearchRequest
from app.services.history import HistoryRecorder, get_history_recorder
from app.services.identity import IdentityResolver, get_identity_resolver, new_session_id

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("footysearch")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

GENERIC_ERROR = "Search failed. Please try again later."


@lru_cache(maxsize=1)
def get_gateway() -> QueryGateway:
    """Gateway built once from configuration.

    A ConfigurationError is not cached, so the next request tries again.
    """
    return QueryGateway.from_settings(settings)


def gateway_factory() -> Callable[[], QueryGateway]:
    """FastAPI dependency — hands the handler a way to build the gateway.

    The gateway is only built after the request body passed validation, so a
    blank query is rejected with 400 even when configuration is incomplete.
    """
    return get_gateway


# ═══════════════ LIFESPAN ═══════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Footy Search backend starting")

    try:
        gateway = get_gateway()
        logger.info("Resolution mode: %s", gateway.mode.describe())
    except ConfigurationError as e:
        logger.error("Configuration error — searches will fail until fixed: %s", e)

    # Initialize database (graceful degradation if unavailable)
    from app.database import close_db, init_db
    db_ok = await init_db()
    logger.info("Database: %s", "connected" if db_ok else "unavailable (continuing without)")

    yield

    await close_db()
    logger.info("Footy Search backend shutting down")


# ═══════════════ APP ═══════════════

app = FastAPI(
    title="Footy Search API",
    description="Football search answers with cited sources",
    version="1.0.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def cors_headers(request: Request, call_next):
    # Pre-flights, errors and framework 404/422 responses included
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=CORS_HEADERS)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    # Detail stays in the log; the client only sees the public message
    if exc.status_code >= 500:
        logger.error("Request failed | %s | %s", type(exc).__name__, str(exc)[:300])
    else:
        logger.info("Request rejected | %s | %s", type(exc).__name__, str(exc)[:300])
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=CORS_HEADERS)


def _client_metadata(request: Request) -> ClientMetadata:
    client_ip = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
    if not client_ip:
        client_ip = request.client.host if request.client else "unknown"
    return ClientMetadata(
        ip_address=client_ip,
        user_agent=request.headers.get("user-agent", ""),
    )


# ═══════════════ ENDPOINTS ═══════════════

@app.options("/{path:path}", include_in_schema=False)
async def preflight(path: str):
    return Response(status_code=200, headers=CORS_HEADERS)


@app.get("/health")
async def health():
    from app import database

    body = {
        "status": "ok",
        "mode": None,
        "search_provider": None,
        "generation_provider": None,
        "database": database.engine is not None,
    }
    try:
        mode = get_gateway().mode
    except ConfigurationError as e:
        body["config_error"] = str(e)
    else:
        body.update(
            mode=mode.kind.value,
            search_provider=mode.search_provider,
            generation_provider=mode.generation_provider,
        )
    return JSONResponse(content=body, headers=CORS_HEADERS)


@app.post("/")
@app.post("/api/search")
async def search(
    request: Request,
    background_tasks: BackgroundTasks,
    build_gateway: Callable[[], QueryGateway] = Depends(gateway_factory),
    recorder: HistoryRecorder = Depends(get_history_recorder),
    identity: IdentityResolver = Depends(get_identity_resolver),
):
    """Main search endpoint."""
    try:
        body = await request.json()
    except ValueError:
        return _error(400, "Invalid request body")
    if not isinstance(body, dict):
        return _error(400, "Invalid request body")

    query = validate_query(body.get("query"))
    gateway = build_gateway()

    user_id = await identity.resolve(request.headers.get("authorization"))
    search_req = SearchRequest(
        query=query,
        requester_identity=user_id,
        session_id=None if user_id else new_session_id(),
        client=_client_metadata(request),
    )

    start = time.monotonic()
    try:
        result = await gateway.resolve(search_req)
    except GatewayError:
        raise
    except Exception as e:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.exception("Search failed | %dms | %s", elapsed_ms, str(e)[:300])
        return _error(500, GENERIC_ERROR)

    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        "Search completed | mode=%s | sources=%d | %dms | authenticated=%s",
        gateway.mode.kind.value, len(result.sources), elapsed_ms, search_req.is_authenticated,
    )

    # Log to DB in background (fire-and-forget)
    background_tasks.add_task(recorder.record_exchange, search_req, result)

    return JSONResponse(content=result.model_dump(), headers=CORS_HEADERS)


@app.get("/history")
async def history(
    request: Request,
    limit: int = 10,
    recorder: HistoryRecorder = Depends(get_history_recorder),
    identity: IdentityResolver = Depends(get_identity_resolver),
):
    """Recent queries of the signed-in user."""
    user_id = await identity.resolve(request.headers.get("authorization"))
    if not user_id:
        return _error(401, "Authentication required")

    entries = await recorder.recent_queries(user_id, limit=max(1, min(limit, 50)))
    return JSONResponse(
        content={"history": [e.model_dump() for e in entries]},
        headers=CORS_HEADERS,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
