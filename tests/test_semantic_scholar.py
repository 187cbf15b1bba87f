#!/usr/bin/env python
"""Tests for the Semantic Scholar client.

Covers:
- arXiv id normalisation
- Response parsing into Paper / Citation
- 404 handling and typed errors for other statuses
- Recommendation ordering

Run with: pytest tests/test_semantic_scholar.py -v
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from models.paper import Citation, Paper, SearchOptions
from services import semantic_scholar
from services.errors import APIError, ErrorType
from utils.rate_limiter import RateLimiter


S2_PAPER = {
    "paperId": "204e3073870fae3d05bcbc2f6a8e263d9b72e776",
    "title": "Attention is All you Need",
    "abstract": "The dominant sequence transduction models...",
    "year": 2017,
    "venue": "Neural Information Processing Systems",
    "citationCount": 100000,
    "referenceCount": 40,
    "authors": [
        {"authorId": "40348417", "name": "Ashish Vaswani"},
        {"authorId": "1846258", "name": "Noam Shazeer"},
    ],
    "externalIds": {"ArXiv": "1706.03762", "DOI": "10.5555/3295222.3295349"},
    "openAccessPdf": None,
    "publicationDate": "2017-06-12",
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
    monkeypatch.setattr(semantic_scholar, "_rate_limiter", RateLimiter(0))


# === Id handling ===

def test_normalize_arxiv_id():
    assert semantic_scholar.normalize_paper_id("1706.03762") == "arXiv:1706.03762"
    assert semantic_scholar.normalize_paper_id("1706.03762v5") == "arXiv:1706.03762"
    assert semantic_scholar.normalize_paper_id("2301.12345") == "arXiv:2301.12345"


def test_normalize_leaves_other_ids_alone():
    assert semantic_scholar.normalize_paper_id("DOI:10.1/abc") == "DOI:10.1/abc"
    assert semantic_scholar.normalize_paper_id(S2_PAPER["paperId"]) == S2_PAPER["paperId"]


# === Parsing ===

def test_paper_from_semantic_scholar():
    paper = Paper.from_semantic_scholar(S2_PAPER)
    assert paper.id == S2_PAPER["paperId"]
    assert paper.author_names == ["Ashish Vaswani", "Noam Shazeer"]
    assert paper.arxiv_id == "1706.03762"
    assert paper.doi == "10.5555/3295222.3295349"
    assert paper.pdf_url is None
    assert paper.url.endswith(S2_PAPER["paperId"])


@pytest.mark.asyncio
async def test_search_papers_builds_params_and_parses():
    session = _mock_session(json_data={"total": 1234, "offset": 0, "data": [S2_PAPER]})

    with patch("services.semantic_scholar.aiohttp.ClientSession", return_value=session):
        result = await semantic_scholar.search_papers(
            SearchOptions(query="transformers", max_results=5, year_from=2017, year_to=2020)
        )

    assert result.total_results == 1234
    assert result.limit == 5
    assert [p.title for p in result.papers] == ["Attention is All you Need"]

    params = session.get.call_args.kwargs["params"]
    assert params["query"] == "transformers"
    assert params["limit"] == "5"
    assert params["year"] == "2017-2020"
    assert "venue" not in params


@pytest.mark.asyncio
async def test_get_paper_uses_arxiv_prefix():
    session = _mock_session(json_data=S2_PAPER)

    with patch("services.semantic_scholar.aiohttp.ClientSession", return_value=session):
        paper = await semantic_scholar.get_paper("1706.03762v1")

    assert paper.citation_count == 100000
    assert session.get.call_args.args[0].endswith("/paper/arXiv:1706.03762")


@pytest.mark.asyncio
async def test_get_paper_404_returns_none():
    session = _mock_session(status=404)

    with patch("services.semantic_scholar.aiohttp.ClientSession", return_value=session):
        assert await semantic_scholar.get_paper("missing") is None


@pytest.mark.asyncio
async def test_get_citations_404_returns_empty():
    session = _mock_session(status=404)

    with patch("services.semantic_scholar.aiohttp.ClientSession", return_value=session):
        assert await semantic_scholar.get_citations("missing") == []


@pytest.mark.asyncio
async def test_server_error_raises_api_error():
    session = _mock_session(status=500, text="internal error")

    with patch("services.semantic_scholar.aiohttp.ClientSession", return_value=session):
        with pytest.raises(APIError) as exc_info:
            await semantic_scholar.get_paper("abc")

    assert exc_info.value.status == 500
    assert exc_info.value.error_type == ErrorType.API_ERROR
    assert session.get.call_count == 1


@pytest.mark.asyncio
async def test_get_citations_parses_influence():
    data = {"data": [
        {"citingPaper": S2_PAPER, "isInfluential": True},
        {"citingPaper": {"paperId": None, "title": "dangling"}, "isInfluential": False},
    ]}
    session = _mock_session(json_data=data)

    with patch("services.semantic_scholar.aiohttp.ClientSession", return_value=session):
        citations = await semantic_scholar.get_citations("abc", limit=2)

    assert len(citations) == 1
    assert citations[0].is_influential is True
    assert session.get.call_args.kwargs["params"]["fields"].startswith("citingPaper.")


# === Recommendations ===

def _citation(paper_id, influential=False):
    return Citation(paper=Paper(id=paper_id, title=paper_id), is_influential=influential)


@pytest.mark.asyncio
async def test_recommendations_prefer_influential_and_dedupe():
    citations = [_citation("c1"), _citation("c2", True), _citation("shared")]
    references = [_citation("r1", True), _citation("shared", True), _citation("r2")]

    with patch.object(semantic_scholar, "get_citations", AsyncMock(return_value=citations)), \
            patch.object(semantic_scholar, "get_references", AsyncMock(return_value=references)):
        related = await semantic_scholar.get_recommendations("p", limit=5)

    assert [p.id for p in related] == ["c2", "r1", "shared", "c1", "r2"]


@pytest.mark.asyncio
async def test_recommendations_respect_limit():
    citations = [_citation(f"c{i}") for i in range(3)]
    references = [_citation(f"r{i}") for i in range(3)]

    with patch.object(semantic_scholar, "get_citations", AsyncMock(return_value=citations)) as mock_cit, \
            patch.object(semantic_scholar, "get_references", AsyncMock(return_value=references)):
        related = await semantic_scholar.get_recommendations("p", limit=3)

    assert len(related) == 3
    mock_cit.assert_awaited_once_with("p", 2)


@pytest.mark.asyncio
async def test_search_by_author_without_match():
    session = _mock_session(json_data={"data": []})

    with patch("services.semantic_scholar.aiohttp.ClientSession", return_value=session):
        assert await semantic_scholar.search_by_author("Nobody") == []
