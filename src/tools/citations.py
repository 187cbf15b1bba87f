"""Citation graph tools: citing papers, references and related papers."""

from typing import List, Optional

from cache import CacheStore, cached_fetch, create_cache_key
from models.paper import Citation, Paper
from services import semantic_scholar
from tools.formatting import paper_list

INFLUENTIAL_MARK = " ⭐ Influential"


async def get_citations(
    paper_id: str,
    limit: int = 10,
    store: Optional[CacheStore] = None,
) -> List[Citation]:
    """Papers citing ``paper_id``."""
    cache_key = create_cache_key("citations", {"paper_id": paper_id, "limit": limit})
    return await cached_fetch(
        cache_key,
        lambda: semantic_scholar.get_citations(paper_id, limit),
        store=store,
    )


async def get_references(
    paper_id: str,
    limit: int = 10,
    store: Optional[CacheStore] = None,
) -> List[Citation]:
    """Papers referenced by ``paper_id``."""
    cache_key = create_cache_key("references", {"paper_id": paper_id, "limit": limit})
    return await cached_fetch(
        cache_key,
        lambda: semantic_scholar.get_references(paper_id, limit),
        store=store,
    )


async def get_related_papers(
    paper_id: str,
    limit: int = 10,
    store: Optional[CacheStore] = None,
) -> List[Paper]:
    """Papers related to ``paper_id`` through its citation neighbourhood."""
    cache_key = create_cache_key("related", {"paper_id": paper_id, "limit": limit})
    return await cached_fetch(
        cache_key,
        lambda: semantic_scholar.get_recommendations(paper_id, limit),
        store=store,
    )


def _format_edges(header: str, edges: List[Citation]) -> str:
    return paper_list(
        header,
        [e.paper for e in edges],
        [INFLUENTIAL_MARK if e.is_influential else "" for e in edges],
    )


def format_citations(citations: List[Citation], paper_id: str) -> str:
    if not citations:
        return f"No citations found for paper {paper_id}"
    return _format_edges(f"## Papers citing {paper_id} ({len(citations)} found)\n", citations)


def format_references(references: List[Citation], paper_id: str) -> str:
    if not references:
        return f"No references found for paper {paper_id}"
    return _format_edges(f"## References from {paper_id} ({len(references)} found)\n", references)


def format_related_papers(papers: List[Paper], paper_id: str) -> str:
    if not papers:
        return f"No related papers found for {paper_id}"
    return paper_list(f"## Related papers to {paper_id} ({len(papers)} found)\n", papers)
