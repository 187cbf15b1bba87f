"""Paper detail lookup merging Semantic Scholar and arXiv metadata."""

import asyncio
import dataclasses
import logging
from typing import Optional

from cache import CacheStore, cached_fetch, create_cache_key
from models.paper import Paper
from services import arxiv as arxiv_service
from services import semantic_scholar

logger = logging.getLogger(__name__)


async def _details_for_arxiv_id(paper_id: str) -> Optional[Paper]:
    arxiv_result, s2_result = await asyncio.gather(
        arxiv_service.get_arxiv_paper(paper_id),
        semantic_scholar.get_paper(paper_id),
        return_exceptions=True,
    )
    if isinstance(arxiv_result, BaseException) and isinstance(s2_result, BaseException):
        raise arxiv_result

    paper = None if isinstance(arxiv_result, BaseException) else arxiv_result
    s2_paper = None if isinstance(s2_result, BaseException) else s2_result
    if isinstance(arxiv_result, BaseException):
        logger.warning(f"arXiv lookup failed for {paper_id}: {arxiv_result}")
    if isinstance(s2_result, BaseException):
        logger.warning(f"Semantic Scholar lookup failed for {paper_id}: {s2_result}")

    if paper and s2_paper:
        return dataclasses.replace(
            paper,
            citation_count=s2_paper.citation_count,
            reference_count=s2_paper.reference_count,
            venue=s2_paper.venue or paper.venue,
        )
    return paper or s2_paper


async def _details_for_s2_id(paper_id: str) -> Optional[Paper]:
    s2_paper = await semantic_scholar.get_paper(paper_id)
    if not s2_paper or not s2_paper.arxiv_id:
        return s2_paper

    arxiv_paper = await arxiv_service.get_arxiv_paper(s2_paper.arxiv_id)
    if not arxiv_paper:
        return s2_paper
    return dataclasses.replace(
        s2_paper,
        pdf_url=s2_paper.pdf_url or arxiv_paper.pdf_url,
        categories=arxiv_paper.categories,
    )


async def get_paper_details(paper_id: str, store: Optional[CacheStore] = None) -> Optional[Paper]:
    """
    Get full metadata for a paper.

    For a bare arXiv id, arXiv metadata is enriched with Semantic Scholar
    citation counts and venue. For any other id, Semantic Scholar metadata is
    enriched with the arXiv PDF link and categories when available.

    Args:
        paper_id: arXiv id, Semantic Scholar id, ``DOI:...`` etc.
        store: Cache to use, defaults to the process-wide store

    Returns:
        Paper, or None if no source knows it
    """
    cache_key = create_cache_key("details", {"paper_id": paper_id})

    async def fetch() -> Optional[Paper]:
        if semantic_scholar.is_arxiv_id(paper_id):
            return await _details_for_arxiv_id(paper_id)
        return await _details_for_s2_id(paper_id)

    return await cached_fetch(cache_key, fetch, store=store)


def format_paper_details(paper: Paper) -> str:
    """Format paper metadata as a Markdown document."""
    lines = [f"# {paper.title}\n"]
    lines.append(f"**Authors:** {', '.join(paper.author_names)}\n")

    lines.append("## Metadata")
    lines.append(f"- **Year:** {paper.year or 'N/A'}")
    if paper.venue:
        lines.append(f"- **Venue:** {paper.venue}")
    lines.append(f"- **Citations:** {'N/A' if paper.citation_count is None else paper.citation_count}")
    lines.append(f"- **References:** {'N/A' if paper.reference_count is None else paper.reference_count}")
    if paper.arxiv_id:
        lines.append(f"- **arXiv ID:** {paper.arxiv_id}")
    if paper.doi:
        lines.append(f"- **DOI:** {paper.doi}")
    if paper.categories:
        lines.append(f"- **Categories:** {', '.join(paper.categories)}")

    lines.append("\n## Links")
    if paper.url:
        lines.append(f"- **URL:** {paper.url}")
    if paper.pdf_url:
        lines.append(f"- **PDF:** {paper.pdf_url}")

    lines.append("\n## Abstract")
    lines.append(paper.abstract or "No abstract available.")

    lines.append(f"\n---\n**Paper ID:** {paper.id}")
    return "\n".join(lines)
