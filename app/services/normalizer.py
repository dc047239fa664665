"""Response normalizer — provider JSON to ``SourceCitation`` lists.

Every function here is total: missing or malformed fields are defaulted,
never raised.
"""

from typing import Any

from app.orchestrator.schemas import SourceCitation

DEFAULT_TITLE = "No title"
DEFAULT_SNIPPET = "No description available"
DEFAULT_URL = "#"

DOCUMENT_PLACEHOLDER = SourceCitation(
    title="Document-based Answer",
    url="#",
    snippet="Answer retrieved from document knowledge base",
)

# Filler shown by modes that do no web search. Not evidence for the summary.
FOOTBALL_PLACEHOLDERS = [
    SourceCitation(
        title="ESPN FC",
        url="https://www.espn.com/soccer/",
        snippet="Football news, scores, fixtures and analysis.",
    ),
    SourceCitation(
        title="BBC Sport Football",
        url="https://www.bbc.com/sport/football",
        snippet="Live football coverage, results and match reports.",
    ),
    SourceCitation(
        title="Sky Sports Football",
        url="https://www.skysports.com/football",
        snippet="Latest football news, transfers and highlights.",
    ),
]

SNIPPET_MAX_CHARS = 300


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def normalize_result(raw: Any) -> SourceCitation:
    """Map one web-search result ``{title, link|url, snippet}`` to a citation."""
    if isinstance(raw, SourceCitation):
        return raw
    if not isinstance(raw, dict):
        raw = {}
    return SourceCitation(
        title=_text(raw.get("title")) or DEFAULT_TITLE,
        url=_text(raw.get("link")) or _text(raw.get("url")) or DEFAULT_URL,
        snippet=_text(raw.get("snippet")) or DEFAULT_SNIPPET,
    )


def normalize_search_results(results: Any) -> list[SourceCitation]:
    """Normalize a list of web-search results, keeping order and duplicates."""
    if not isinstance(results, list):
        return []
    return [normalize_result(r) for r in results]


def normalize_document(doc: Any) -> SourceCitation:
    """Reshape one retrieval document to the canonical citation fields.

    Entries already shaped like citations keep their values; Flowise documents
    (``pageContent`` + ``metadata``) fill the gaps.
    """
    if isinstance(doc, SourceCitation):
        return doc
    if isinstance(doc, str):
        doc = {"pageContent": doc}
    if not isinstance(doc, dict):
        doc = {}
    metadata = doc.get("metadata") if isinstance(doc.get("metadata"), dict) else {}

    source = _text(metadata.get("source"))
    title = (
        _text(doc.get("title"))
        or _text(metadata.get("title"))
        or source
        or DOCUMENT_PLACEHOLDER.title
    )
    url = _text(doc.get("url")) or _text(doc.get("link")) or _text(metadata.get("url"))
    if not url and source.startswith(("http://", "https://")):
        url = source
    snippet = _text(doc.get("snippet")) or _text(doc.get("pageContent"))[:SNIPPET_MAX_CHARS]

    return SourceCitation(
        title=title,
        url=url or DEFAULT_URL,
        snippet=snippet or DEFAULT_SNIPPET,
    )


def normalize_documents(payload: Any) -> list[SourceCitation]:
    """Citations from a retrieval endpoint body, or the single placeholder."""
    if isinstance(payload, dict):
        docs = payload.get("sourceDocuments")
        if docs is None:
            docs = payload.get("sources")
        if isinstance(docs, list):
            return [normalize_document(d) for d in docs]
    return [DOCUMENT_PLACEHOLDER.model_copy()]


def placeholder_citations() -> list[SourceCitation]:
    return [c.model_copy() for c in FOOTBALL_PLACEHOLDERS]


def extract_answer(payload: Any) -> str:
    """Answer text of a retrieval endpoint body."""
    if isinstance(payload, dict):
        for key in ("text", "answer", "result"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return "No answer found"


def numbered_summary(citations: list[SourceCitation], query: str = "") -> str:
    """Deterministic summary used when no generation step runs or it fails."""
    if not citations:
        return f'No results found for "{query}".'
    return "\n\n".join(
        f"{i}. **{c.title}**\n{c.snippet}" for i, c in enumerate(citations, start=1)
    )


def build_context(citations: list[SourceCitation]) -> str:
    """Numbered citation block handed to a generation provider as context."""
    if not citations:
        return "(no search results)"
    return "\n".join(
        f"[{i}] {c.title}\nURL: {c.url}\n{c.snippet}" for i, c in enumerate(citations, start=1)
    )
