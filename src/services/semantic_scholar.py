"""Semantic Scholar service - paper search and citation graph lookups.

All requests share one rate limiter (1 request/second without an API key)
and are retried with exponential backoff on 429 and transient network
failures. Failures are raised as ServiceError subclasses; "not found" is
reported as None / [] rather than as an error.
"""

import asyncio
import logging
import math
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp

from models.paper import Citation, Paper, SearchOptions, SearchResult, strip_arxiv_version
from services.errors import (
    APIError,
    APITimeoutError,
    NetworkError,
    RateLimitError,
    retry_on_rate_limit,
)
from utils.config import Config
from utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

SOURCE = "semantic_scholar"
BASE_URL = "https://api.semanticscholar.org/graph/v1"

PAPER_FIELDS = ",".join([
    "paperId",
    "title",
    "abstract",
    "year",
    "venue",
    "citationCount",
    "referenceCount",
    "authors",
    "externalIds",
    "openAccessPdf",
    "publicationDate",
    "isOpenAccess",
])

_ARXIV_ID_PATTERN = re.compile(r"^\d{4}\.\d{4,5}(v\d+)?$")

_rate_limiter = RateLimiter(Config.SEMANTIC_SCHOLAR_MIN_INTERVAL, name=SOURCE)


def _headers() -> Dict[str, str]:
    # API key is optional; it raises the rate limit
    if Config.SEMANTIC_SCHOLAR_API_KEY:
        return {"x-api-key": Config.SEMANTIC_SCHOLAR_API_KEY}
    return {}


def is_arxiv_id(paper_id: str) -> bool:
    """Check for a bare new-style arXiv id such as ``1706.03762v5``."""
    return bool(_ARXIV_ID_PATTERN.match(paper_id))


def normalize_paper_id(paper_id: str) -> str:
    """Map a bare arXiv id onto Semantic Scholar's ``arXiv:`` id form."""
    if is_arxiv_id(paper_id):
        return f"arXiv:{strip_arxiv_version(paper_id)}"
    return paper_id


@retry_on_rate_limit()
async def _make_request(endpoint: str, params: Optional[dict] = None) -> Optional[dict]:
    """Make a GET request to the Graph API.

    Returns:
        Decoded JSON body, or None on 404
    """
    await _rate_limiter.wait_if_needed_async()
    url = f"{BASE_URL}/{endpoint}"

    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                params=params,
                headers=_headers(),
                timeout=aiohttp.ClientTimeout(total=Config.HTTP_TIMEOUT),
            ) as response:
                if response.status == 200:
                    return await response.json()
                if response.status == 404:
                    logger.debug(f"Semantic Scholar: 404 for {endpoint}")
                    return None
                if response.status == 429:
                    raise RateLimitError(
                        "Semantic Scholar API rate limit exceeded. Please wait and try again.",
                        source=SOURCE,
                        status=429,
                    )
                text = await response.text()
                raise APIError(
                    f"API error {response.status}: {text[:200]}",
                    source=SOURCE,
                    status=response.status,
                )
    except asyncio.TimeoutError as e:
        raise APITimeoutError(f"Request to {endpoint} timed out", source=SOURCE, original_error=e) from e
    except aiohttp.ClientError as e:
        raise NetworkError(str(e), source=SOURCE, original_error=e) from e


async def search_papers(options: SearchOptions) -> SearchResult:
    """
    Search for papers on Semantic Scholar.

    Args:
        options: Query, paging and year/venue filters

    Returns:
        SearchResult with converted papers
    """
    params: Dict[str, Any] = {
        "query": options.query,
        "fields": PAPER_FIELDS,
        "limit": str(options.max_results),
        "offset": str(options.offset),
    }

    if options.year_from or options.year_to:
        year_from = options.year_from or 1900
        year_to = options.year_to or datetime.now().year
        params["year"] = f"{year_from}-{year_to}"

    if options.venue:
        params["venue"] = options.venue

    result = await _make_request("paper/search", params) or {}

    papers = [Paper.from_semantic_scholar(p) for p in (result.get("data") or [])]
    return SearchResult(
        papers=papers,
        total_results=result.get("total", len(papers)),
        offset=result.get("offset", options.offset),
        limit=options.max_results,
    )


async def get_paper(paper_id: str) -> Optional[Paper]:
    """
    Get detailed information for a specific paper.

    Args:
        paper_id: Semantic Scholar id, ``DOI:...``, ``arXiv:...`` or a bare
            arXiv id

    Returns:
        Paper, or None if Semantic Scholar does not know it
    """
    result = await _make_request(
        f"paper/{normalize_paper_id(paper_id)}",
        {"fields": PAPER_FIELDS},
    )
    if result is None:
        return None
    return Paper.from_semantic_scholar(result)


async def _get_citation_edges(paper_id: str, relation: str, paper_key: str, limit: int) -> List[Citation]:
    result = await _make_request(
        f"paper/{normalize_paper_id(paper_id)}/{relation}",
        {
            "fields": f"{paper_key}.{PAPER_FIELDS},isInfluential",
            "limit": str(limit),
        },
    )
    if result is None:
        return []

    edges = []
    for item in result.get("data") or []:
        linked = item.get(paper_key)
        if not linked or not linked.get("paperId"):
            continue
        edges.append(Citation(
            paper=Paper.from_semantic_scholar(linked),
            is_influential=bool(item.get("isInfluential")),
        ))
    return edges


async def get_citations(paper_id: str, limit: int = 10) -> List[Citation]:
    """Get papers that cite ``paper_id``."""
    return await _get_citation_edges(paper_id, "citations", "citingPaper", limit)


async def get_references(paper_id: str, limit: int = 10) -> List[Citation]:
    """Get papers that ``paper_id`` cites."""
    return await _get_citation_edges(paper_id, "references", "citedPaper", limit)


async def get_recommendations(paper_id: str, limit: int = 10) -> List[Paper]:
    """
    Find papers related to ``paper_id`` from its citation neighbourhood.

    Influential citing papers come first, then influential references,
    then the remaining neighbours, deduplicated by id.
    """
    half = math.ceil(limit / 2)
    citations, references = await asyncio.gather(
        get_citations(paper_id, half),
        get_references(paper_id, half),
    )

    related: List[Paper] = []
    seen_ids = set()

    def add(paper: Paper) -> None:
        if paper.id not in seen_ids:
            related.append(paper)
            seen_ids.add(paper.id)

    for c in citations:
        if c.is_influential:
            add(c.paper)
    for r in references:
        if r.is_influential:
            add(r.paper)
    for c in citations + references:
        if len(related) >= limit:
            break
        add(c.paper)

    return related[:limit]


async def search_by_author(author_name: str, limit: int = 10) -> List[Paper]:
    """
    Get papers by the best-matching author.

    Args:
        author_name: Author name to search for
        limit: Maximum number of papers

    Returns:
        Papers of the first author match, or [] if nobody matched
    """
    authors = await _make_request("author/search", {"query": author_name, "limit": "5"}) or {}
    matches = authors.get("data") or []
    if not matches:
        logger.info(f"Semantic Scholar: no author found for '{author_name}'")
        return []

    author_id = matches[0]["authorId"]
    result = await _make_request(
        f"author/{author_id}/papers",
        {"fields": PAPER_FIELDS, "limit": str(limit)},
    ) or {}
    return [Paper.from_semantic_scholar(p) for p in (result.get("data") or [])]
