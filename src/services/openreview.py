"""OpenReview service - venue submissions, decisions and reviews.

Uses the public API v2 ``/notes`` endpoint. Requests are spaced at least
``Config.OPENREVIEW_MIN_INTERVAL`` seconds apart and retried on 429 and
transient network failures.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from models.openreview import OpenReviewPaper, Review, average_rating, note_invitation
from services.errors import (
    APIError,
    APITimeoutError,
    NetworkError,
    RateLimitError,
    ServiceError,
    retry_on_rate_limit,
)
from utils.config import Config
from utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

SOURCE = "openreview"
BASE_URL = "https://api2.openreview.net"

# Short venue names mapped to OpenReview group ids
VENUE_MAPPING: Dict[str, List[str]] = {
    "neurips": ["NeurIPS.cc", "NIPS.cc"],
    "iclr": ["ICLR.cc"],
    "icml": ["ICML.cc"],
    "aaai": ["AAAI.org"],
    "acl": ["aclweb.org/ACL"],
    "emnlp": ["aclweb.org/EMNLP"],
    "cvpr": ["thecvf.com/CVPR"],
    "iccv": ["thecvf.com/ICCV"],
}

_rate_limiter = RateLimiter(Config.OPENREVIEW_MIN_INTERVAL, name=SOURCE)


def get_supported_venues() -> List[str]:
    return list(VENUE_MAPPING)


def venue_ids(venue: str) -> List[str]:
    """OpenReview group ids for a short venue name; unknown names are used as given."""
    return VENUE_MAPPING.get(venue.lower(), [venue])


@retry_on_rate_limit()
async def _get_notes(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    """GET ``/notes``; a 404 is reported as no notes."""
    await _rate_limiter.wait_if_needed_async()

    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                f"{BASE_URL}/notes",
                params=params,
                timeout=aiohttp.ClientTimeout(total=Config.HTTP_TIMEOUT),
            ) as response:
                if response.status == 200:
                    data = await response.json()
                    return data.get("notes") or []
                if response.status == 404:
                    return []
                if response.status == 429:
                    raise RateLimitError(source=SOURCE, status=429)
                text = await response.text()
                raise APIError(
                    f"API error {response.status}: {text[:200]}",
                    source=SOURCE,
                    status=response.status,
                )
    except asyncio.TimeoutError as e:
        raise APITimeoutError(source=SOURCE, original_error=e) from e
    except aiohttp.ClientError as e:
        raise NetworkError(str(e), source=SOURCE, original_error=e) from e


async def search_openreview(
    venue: str,
    query: Optional[str] = None,
    year: Optional[int] = None,
    limit: int = 20,
) -> List[OpenReviewPaper]:
    """
    List submissions to a venue, optionally for one year and title query.

    Every group id mapped to ``venue`` is tried in turn until ``limit``
    papers are collected.

    Args:
        venue: Short name (``neurips``, ``iclr``...) or an OpenReview group id
        query: Title search text
        year: Conference year
        limit: Maximum number of papers

    Returns:
        Papers without reviews
    """
    papers: List[OpenReviewPaper] = []

    for venue_id in venue_ids(venue):
        params: Dict[str, Any] = {
            "content.venue": f"{venue_id}/{year}" if year else venue_id,
            "limit": str(limit),
            "details": "replyCount,invitation",
        }
        if query:
            params["content.title"] = query

        notes = await _get_notes(params)
        papers.extend(OpenReviewPaper.from_note(note) for note in notes)
        if len(papers) >= limit:
            break

    return papers[:limit]


async def get_reviews(forum_id: str) -> List[Review]:
    """Official reviews posted in a submission's forum."""
    notes = await _get_notes({"forum": forum_id, "details": "replyCount"})
    return [
        Review.from_note(note)
        for note in notes
        if "review" in note_invitation(note).lower()
    ]


async def get_openreview_info(identifier: str) -> Optional[OpenReviewPaper]:
    """
    Look up a submission by note id, falling back to a title search.

    Reviews are fetched as well; a failed review lookup is logged and the
    paper is returned without them.

    Returns:
        OpenReviewPaper, or None if nothing matched
    """
    notes = await _get_notes({"id": identifier})
    if not notes:
        notes = await _get_notes({"content.title": identifier, "limit": "5"})
    if not notes:
        return None

    paper = OpenReviewPaper.from_note(notes[0])
    try:
        paper.reviews = await get_reviews(paper.id)
    except ServiceError as e:
        logger.warning(f"OpenReview: could not fetch reviews for {paper.id}: {e}")
    paper.average_rating = average_rating(paper.reviews)
    return paper
