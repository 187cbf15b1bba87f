"""arXiv service - Search papers and fetch metadata from arXiv.

Rate limiting strategy:
- Global singleton client (reuses HTTP connection)
- 3s minimum interval between requests (arXiv asks for >= 3s)
- Client-level retry with 5s delay (handles transient errors)
- Interval enforced in the blocking executor thread
"""

import asyncio
import logging
from typing import List, Optional

import arxiv

from models.paper import ARXIV_PDF_URL, Paper, SearchOptions, SearchResult, strip_arxiv_version
from services.errors import APIError
from utils.config import Config
from utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

SOURCE = "arxiv"

# Global singleton client, shared by every search so delay_seconds applies across calls
_arxiv_client: Optional[arxiv.Client] = None
_rate_limiter = RateLimiter(Config.ARXIV_MIN_INTERVAL, name=SOURCE)


def _get_client() -> arxiv.Client:
    """Get or create the global arXiv client singleton."""
    global _arxiv_client
    if _arxiv_client is None:
        _arxiv_client = arxiv.Client(
            page_size=50,
            num_retries=3,
            delay_seconds=5,
        )
    return _arxiv_client


def _run_search(search: arxiv.Search, offset: int = 0) -> List[arxiv.Result]:
    """Execute a search in the calling (executor) thread."""
    _rate_limiter.wait_if_needed()
    try:
        return list(_get_client().results(search, offset=offset))
    except (arxiv.HTTPError, arxiv.UnexpectedEmptyPageError) as e:
        raise APIError(f"arXiv API error: {e}", source=SOURCE, original_error=e) from e


async def _search(search: arxiv.Search, offset: int = 0) -> List[arxiv.Result]:
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, _run_search, search, offset)


async def search_arxiv(options: SearchOptions) -> SearchResult:
    """
    Search arXiv for papers matching the query.

    arXiv has no usable date-range filter, so ``year_from``/``year_to`` are
    applied to the fetched page. ``total_results`` is the page size since
    the client library does not expose the feed total.

    Args:
        options: Query, paging, sort and year filters

    Returns:
        SearchResult with arXiv papers
    """
    if options.sort_by == "date":
        sort_criterion = arxiv.SortCriterion.SubmittedDate
    else:
        sort_criterion = arxiv.SortCriterion.Relevance

    search = arxiv.Search(
        query=f"all:{options.query}",
        max_results=options.max_results,
        sort_by=sort_criterion,
        sort_order=arxiv.SortOrder.Descending,
    )
    results = await _search(search, offset=options.offset)
    papers = [Paper.from_arxiv_result(r) for r in results]

    if options.year_from or options.year_to:
        papers = [
            p for p in papers
            if not (options.year_from and p.year < options.year_from)
            and not (options.year_to and p.year > options.year_to)
        ]

    return SearchResult(
        papers=papers,
        total_results=len(papers),
        offset=options.offset,
        limit=options.max_results,
    )


async def get_arxiv_paper(arxiv_id: str) -> Optional[Paper]:
    """
    Get metadata for a specific arXiv paper.

    Args:
        arxiv_id: arXiv paper ID (e.g., "1706.03762" or "1706.03762v5")

    Returns:
        Paper, or None if arXiv has no such id
    """
    search = arxiv.Search(id_list=[strip_arxiv_version(arxiv_id)])
    results = await _search(search)
    if not results:
        return None
    return Paper.from_arxiv_result(results[0])


async def search_arxiv_by_author(author_name: str, limit: int = 10) -> List[Paper]:
    """Get the most recent arXiv submissions by ``author_name``."""
    search = arxiv.Search(
        query=f"au:{author_name}",
        max_results=limit,
        sort_by=arxiv.SortCriterion.SubmittedDate,
        sort_order=arxiv.SortOrder.Descending,
    )
    results = await _search(search)
    return [Paper.from_arxiv_result(r) for r in results]


def get_arxiv_pdf_url(arxiv_id: str) -> str:
    """PDF URL for the latest version of ``arxiv_id``."""
    return ARXIV_PDF_URL.format(arxiv_id=strip_arxiv_version(arxiv_id))
