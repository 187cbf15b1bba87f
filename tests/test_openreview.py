#!/usr/bin/env python
"""Tests for OpenReview parsing, the API client and the cached tools.

Run with: pytest tests/test_openreview.py -v
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cache import create_cache_key
from models.openreview import OpenReviewPaper, Review, average_rating
from services import openreview
from services.errors import APIError
from tools.openreview import (
    format_openreview_info,
    format_openreview_search_result,
    get_openreview_info,
    search_openreview,
)
from utils.rate_limiter import RateLimiter


SUBMISSION_V2 = {
    "id": "abc123",
    "invitations": ["ICLR.cc/2024/Conference/-/Submission"],
    "cdate": 1695945600000,
    "content": {
        "title": {"value": "Diffusion Models Beat GANs"},
        "authors": {"value": ["Prafulla Dhariwal", "Alex Nichol"]},
        "abstract": {"value": "We show that diffusion models..."},
        "venue": {"value": "ICLR 2024 oral"},
        "pdf": {"value": "/pdf/abc123.pdf"},
        "decision": {"value": "Accept (Oral)"},
    },
}

SUBMISSION_V1 = {
    "id": "old1",
    "invitation": "NeurIPS.cc/2021/Conference/-/Blind_Submission",
    "content": {
        "title": "A v1 Paper",
        "authors": ["Ada Lovelace"],
    },
}

REVIEW_NOTE = {
    "id": "r1",
    "invitations": ["ICLR.cc/2024/Conference/Submission1/-/Official_Review"],
    "content": {
        "rating": {"value": "8: accept, good paper"},
        "confidence": {"value": "4: confident"},
        "summary": {"value": "Strong empirical results."},
        "strengths": {"value": "Clear writing\n\nLarge gains"},
        "weaknesses": {"value": "Compute heavy"},
    },
}


def _mock_session(status=200, json_data=None, text=""):
    mock_resp = AsyncMock()
    mock_resp.status = status
    mock_resp.json = AsyncMock(return_value=json_data)
    mock_resp.text = AsyncMock(return_value=text)

    mock_session = AsyncMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    mock_session.get = MagicMock(return_value=AsyncMock(
        __aenter__=AsyncMock(return_value=mock_resp),
        __aexit__=AsyncMock(return_value=False),
    ))
    return mock_session


@pytest.fixture(autouse=True)
def no_rate_limit(monkeypatch):
    monkeypatch.setattr(openreview, "_rate_limiter", RateLimiter(0))


# === Parsing ===

def test_submission_from_v2_note():
    paper = OpenReviewPaper.from_note(SUBMISSION_V2)

    assert paper.title == "Diffusion Models Beat GANs"
    assert paper.authors == ["Prafulla Dhariwal", "Alex Nichol"]
    assert paper.venue == "ICLR 2024 oral"
    assert paper.year == 2024
    assert paper.decision == "Accept"
    assert paper.pdf_url == "https://openreview.net/pdf/abc123.pdf"


def test_submission_from_v1_note_falls_back_to_invitation():
    paper = OpenReviewPaper.from_note(SUBMISSION_V1)

    assert paper.venue == "NeurIPS.cc/2021"
    assert paper.year == 2021
    assert paper.decision == "Pending"
    assert paper.pdf_url is None


def test_review_from_note():
    review = Review.from_note(REVIEW_NOTE)

    assert review.rating == 8
    assert review.confidence == 4
    assert review.strengths == ["Clear writing", "Large gains"]
    assert review.weaknesses == ["Compute heavy"]


def test_average_rating_ignores_unrated_reviews():
    assert average_rating([]) is None
    assert average_rating([Review(rating=0)]) == 0.0
    assert average_rating([Review(rating=8), Review(rating=5), Review(rating=0)]) == 6.5


# === API client ===

def test_venue_mapping():
    assert openreview.venue_ids("NeurIPS") == ["NeurIPS.cc", "NIPS.cc"]
    assert openreview.venue_ids("MyWorkshop.org") == ["MyWorkshop.org"]


@pytest.mark.asyncio
async def test_search_builds_venue_path():
    session = _mock_session(json_data={"notes": [SUBMISSION_V2]})

    with patch("services.openreview.aiohttp.ClientSession", return_value=session):
        papers = await openreview.search_openreview("iclr", query="diffusion", year=2024, limit=5)

    assert [p.id for p in papers] == ["abc123"]
    params = session.get.call_args.kwargs["params"]
    assert params["content.venue"] == "ICLR.cc/2024"
    assert params["content.title"] == "diffusion"
    assert params["limit"] == "5"


@pytest.mark.asyncio
async def test_search_tries_every_group_until_limit():
    get_notes = AsyncMock(side_effect=[[SUBMISSION_V2], [SUBMISSION_V1]])

    with patch.object(openreview, "_get_notes", get_notes):
        papers = await openreview.search_openreview("neurips", limit=2)

    assert [p.id for p in papers] == ["abc123", "old1"]
    venues = [call.args[0]["content.venue"] for call in get_notes.await_args_list]
    assert venues == ["NeurIPS.cc", "NIPS.cc"]


@pytest.mark.asyncio
async def test_server_error_raises_api_error():
    session = _mock_session(status=503, text="maintenance")

    with patch("services.openreview.aiohttp.ClientSession", return_value=session):
        with pytest.raises(APIError):
            await openreview.search_openreview("iclr")


@pytest.mark.asyncio
async def test_info_falls_back_to_title_and_loads_reviews():
    get_notes = AsyncMock(side_effect=[[], [SUBMISSION_V2], [SUBMISSION_V2, REVIEW_NOTE]])

    with patch.object(openreview, "_get_notes", get_notes):
        paper = await openreview.get_openreview_info("Diffusion Models Beat GANs")

    assert paper.id == "abc123"
    assert len(paper.reviews) == 1
    assert paper.average_rating == 8.0
    assert get_notes.await_args_list[1].args[0]["content.title"] == "Diffusion Models Beat GANs"
    assert get_notes.await_args_list[2].args[0]["forum"] == "abc123"


@pytest.mark.asyncio
async def test_info_keeps_paper_when_reviews_fail():
    get_notes = AsyncMock(side_effect=[[SUBMISSION_V2], APIError("boom", source="openreview")])

    with patch.object(openreview, "_get_notes", get_notes):
        paper = await openreview.get_openreview_info("abc123")

    assert paper.reviews == []
    assert paper.average_rating is None


@pytest.mark.asyncio
async def test_info_not_found():
    with patch.object(openreview, "_get_notes", AsyncMock(return_value=[])):
        assert await openreview.get_openreview_info("nothing") is None


# === Cached tools ===

@pytest.mark.asyncio
async def test_search_tool_is_cached(store):
    mock = AsyncMock(return_value=[OpenReviewPaper.from_note(SUBMISSION_V2)])

    with patch.object(openreview, "search_openreview", mock):
        await search_openreview("iclr", year=2024, store=store)
        await search_openreview("iclr", year=2024, store=store)

    mock.assert_awaited_once_with("iclr", None, 2024, 20)
    key = create_cache_key("openreview_search", {"venue": "iclr", "query": None, "year": 2024, "limit": 20})
    assert key == 'openreview_search:limit=20&query=null&venue="iclr"&year=2024'
    assert key in store.get_stats()["keys"]


@pytest.mark.asyncio
async def test_info_tool_caches_not_found(store):
    mock = AsyncMock(return_value=None)

    with patch.object(openreview, "get_openreview_info", mock):
        assert await get_openreview_info("nothing", store=store) is None
        assert await get_openreview_info("nothing", store=store) is None

    mock.assert_awaited_once()
    assert 'openreview_info:identifier="nothing"' in store.get_stats()["keys"]


# === Formatting ===

def test_format_search_result_lists_supported_venues_when_empty():
    text = format_openreview_search_result([], "foo")
    assert text.startswith("No papers found for venue: foo")
    assert "neurips" in text


def test_format_info_with_reviews():
    paper = OpenReviewPaper.from_note(SUBMISSION_V2)
    paper.reviews = [Review.from_note(REVIEW_NOTE)]
    paper.average_rating = average_rating(paper.reviews)

    text = format_openreview_info(paper)

    assert text.startswith("# Diffusion Models Beat GANs")
    assert "- **Decision:** Accept" in text
    assert "- **Average Rating:** 8.0/10" in text
    assert "### Reviewer 1" in text
    assert "  - Clear writing" in text
    assert text.endswith("**OpenReview ID:** abc123")
