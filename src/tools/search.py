"""Keyword and author search across Semantic Scholar and arXiv."""

import asyncio
import logging
from typing import List, Optional

from cache import CacheStore, cached_fetch, create_cache_key
from models.paper import Paper, SearchOptions, SearchResult
from services import arxiv as arxiv_service
from services import semantic_scholar
from tools.formatting import na, paper_lines

logger = logging.getLogger(__name__)


def _merge_unique(primary: List[Paper], secondary: List[Paper]) -> List[Paper]:
    """Concatenate two result lists, dropping papers already seen by id or arXiv id."""
    merged: List[Paper] = []
    seen_ids = set()

    for paper in primary:
        if paper.id in seen_ids:
            continue
        merged.append(paper)
        seen_ids.add(paper.id)
        if paper.arxiv_id:
            seen_ids.add(paper.arxiv_id)

    for paper in secondary:
        if paper.id in seen_ids or (paper.arxiv_id and paper.arxiv_id in seen_ids):
            continue
        merged.append(paper)
        seen_ids.add(paper.id)

    return merged


def _raise_if_all_failed(results: list) -> None:
    # Only a total outage is an error; a partial result is still worth caching
    errors = [r for r in results if isinstance(r, BaseException)]
    if errors and len(errors) == len(results):
        raise errors[0]


async def search_papers(options: SearchOptions, store: Optional[CacheStore] = None) -> SearchResult:
    """
    Search Semantic Scholar and arXiv together.

    Semantic Scholar results come first since they carry citation counts;
    arXiv only contributes papers Semantic Scholar did not return. A failing
    source is logged and skipped.

    Args:
        options: Search parameters
        store: Cache to use, defaults to the process-wide store

    Returns:
        Merged, optionally re-sorted result page
    """
    cache_key = create_cache_key("search", options)

    async def fetch() -> SearchResult:
        s2_result, arxiv_result = await asyncio.gather(
            semantic_scholar.search_papers(options),
            arxiv_service.search_arxiv(options),
            return_exceptions=True,
        )
        _raise_if_all_failed([s2_result, arxiv_result])

        s2_papers: List[Paper] = []
        arxiv_papers: List[Paper] = []
        total_results = 0

        if isinstance(s2_result, BaseException):
            logger.warning(f"Semantic Scholar search failed: {s2_result}")
        else:
            s2_papers = s2_result.papers
            total_results = s2_result.total_results

        if isinstance(arxiv_result, BaseException):
            logger.warning(f"arXiv search failed: {arxiv_result}")
        else:
            arxiv_papers = arxiv_result.papers
            if total_results == 0:
                total_results = arxiv_result.total_results

        papers = _merge_unique(s2_papers, arxiv_papers)

        if options.sort_by == "citations":
            papers.sort(key=lambda p: p.citation_count or 0, reverse=True)
        elif options.sort_by == "date":
            papers.sort(key=lambda p: p.year or 0, reverse=True)

        return SearchResult(
            papers=papers[:options.max_results],
            total_results=total_results,
            offset=options.offset,
            limit=options.max_results,
        )

    return await cached_fetch(cache_key, fetch, store=store)


async def search_by_author(
    author_name: str,
    limit: int = 10,
    store: Optional[CacheStore] = None,
) -> List[Paper]:
    """Papers by an author from both sources, newest first."""
    cache_key = create_cache_key("author", {"author_name": author_name, "limit": limit})

    async def fetch() -> List[Paper]:
        s2_result, arxiv_result = await asyncio.gather(
            semantic_scholar.search_by_author(author_name, limit),
            arxiv_service.search_arxiv_by_author(author_name, limit),
            return_exceptions=True,
        )
        _raise_if_all_failed([s2_result, arxiv_result])

        if isinstance(s2_result, BaseException):
            logger.warning(f"Semantic Scholar author search failed: {s2_result}")
            s2_result = []
        if isinstance(arxiv_result, BaseException):
            logger.warning(f"arXiv author search failed: {arxiv_result}")
            arxiv_result = []

        papers = _merge_unique(s2_result, arxiv_result)
        papers.sort(key=lambda p: p.year or 0, reverse=True)
        return papers[:limit]

    return await cached_fetch(cache_key, fetch, store=store)


def format_search_result(result: SearchResult) -> str:
    """Format search results as Markdown."""
    if not result.papers:
        return "No papers found."

    lines = [f"Found {result.total_results} papers (showing {len(result.papers)}):\n"]
    for i, paper in enumerate(result.papers, 1):
        lines.extend(paper_lines(paper, i))
        if paper.arxiv_id:
            lines.append(f"   arXiv: {paper.arxiv_id}")
        lines.append(f"   ID: {paper.id}")
        lines.append("")

    return "\n".join(lines)


def format_author_search_result(papers: List[Paper], author_name: str) -> str:
    """Format an author's papers as Markdown."""
    if not papers:
        return f"No papers found for author: {author_name}"

    lines = [f"Papers by {author_name} ({len(papers)} found):\n"]
    for i, paper in enumerate(papers, 1):
        lines.append(f"{i}. **{paper.title}** ({na(paper.year)})")
        citations = "N/A" if paper.citation_count is None else paper.citation_count
        lines.append(f"   Citations: {citations}")
        if paper.venue:
            lines.append(f"   Venue: {paper.venue}")
        lines.append(f"   ID: {paper.id}")
        lines.append("")

    return "\n".join(lines)
