"""Cached OpenReview lookups and their Markdown renderings."""

from typing import List, Optional

from cache import CacheStore, cached_fetch, create_cache_key
from models.openreview import OpenReviewPaper
from services import openreview


async def search_openreview(
    venue: str,
    query: Optional[str] = None,
    year: Optional[int] = None,
    limit: int = 20,
    store: Optional[CacheStore] = None,
) -> List[OpenReviewPaper]:
    """Submissions to ``venue``, optionally filtered by year and title."""
    cache_key = create_cache_key(
        "openreview_search",
        {"venue": venue, "query": query, "year": year, "limit": limit},
    )
    return await cached_fetch(
        cache_key,
        lambda: openreview.search_openreview(venue, query, year, limit),
        store=store,
    )


async def get_openreview_info(
    identifier: str,
    store: Optional[CacheStore] = None,
) -> Optional[OpenReviewPaper]:
    """Submission with reviews by OpenReview id or title, None if unknown."""
    cache_key = create_cache_key("openreview_info", {"identifier": identifier})
    return await cached_fetch(
        cache_key,
        lambda: openreview.get_openreview_info(identifier),
        store=store,
    )


def format_supported_venues() -> str:
    venues = "\n".join(f"- {v.upper()}" for v in openreview.get_supported_venues())
    return (
        f"Supported venues for OpenReview search:\n{venues}\n\n"
        'Example: search_openreview with venue="neurips", year=2024'
    )


def format_openreview_search_result(papers: List[OpenReviewPaper], venue: str) -> str:
    if not papers:
        supported = ", ".join(openreview.get_supported_venues())
        return f"No papers found for venue: {venue}\n\nSupported venues: {supported}"

    lines = [f"## OpenReview papers from {venue.upper()} ({len(papers)} found)\n"]
    for i, paper in enumerate(papers, 1):
        lines.append(f"{i}. **{paper.title}**")
        lines.append(f"   Authors: {', '.join(paper.authors)}")
        lines.append(f"   Year: {paper.year} | Decision: {paper.decision}")
        if paper.average_rating is not None:
            lines.append(f"   Average Rating: {paper.average_rating}/10")
        if paper.reviews:
            lines.append(f"   Reviews: {len(paper.reviews)}")
        lines.append(f"   ID: {paper.id}")
        lines.append("")

    return "\n".join(lines)


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else f"{text[:width]}..."


def format_openreview_info(paper: OpenReviewPaper) -> str:
    """Format a submission, its decision and up to three points per review section."""
    lines = [f"# {paper.title}\n"]
    lines.append(f"**Authors:** {', '.join(paper.authors)}\n")

    lines.append("## Metadata")
    lines.append(f"- **Venue:** {paper.venue}")
    lines.append(f"- **Year:** {paper.year}")
    lines.append(f"- **Decision:** {paper.decision}")
    if paper.average_rating is not None:
        lines.append(f"- **Average Rating:** {paper.average_rating}/10")
    if paper.pdf_url:
        lines.append(f"- **PDF:** {paper.pdf_url}")

    lines.append("\n## Abstract")
    lines.append(paper.abstract or "No abstract available.")

    if paper.reviews:
        lines.append("\n## Reviews")
        for i, review in enumerate(paper.reviews, 1):
            lines.append(f"\n### Reviewer {i}")
            lines.append(f"- **Rating:** {review.rating}/10")
            lines.append(f"- **Confidence:** {review.confidence}/5")
            if review.summary:
                lines.append(f"- **Summary:** {_clip(review.summary, 200)}")
            if review.strengths:
                lines.append("- **Strengths:**")
                lines.extend(f"  - {_clip(s, 100)}" for s in review.strengths[:3])
            if review.weaknesses:
                lines.append("- **Weaknesses:**")
                lines.extend(f"  - {_clip(w, 100)}" for w in review.weaknesses[:3])

    lines.append(f"\n---\n**OpenReview ID:** {paper.id}")
    return "\n".join(lines)
