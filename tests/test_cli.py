#!/usr/bin/env python
"""Tests for the paperscout command line entry point."""

from unittest.mock import AsyncMock, patch

import pytest

from cache import get_response_cache
from cli.paperscout_cli import async_main, create_parser
from models.paper import Paper, SearchResult
from services.errors import APIError


def test_parser_global_cache_options():
    args = create_parser().parse_args(["--cache-ttl", "60", "--cache-size", "3", "search", "gnn", "--sort", "date"])

    assert args.cache_ttl == 60
    assert args.cache_size == 3
    assert args.command == "search"
    assert args.sort == "date"


def test_parser_rejects_unknown_sort():
    with pytest.raises(SystemExit):
        create_parser().parse_args(["search", "gnn", "--sort", "stars"])


@pytest.mark.asyncio
async def test_search_command_uses_configured_store(capsys):
    result = SearchResult(papers=[Paper(id="p1", title="Graph Networks", year=2020)], total_results=1)
    args = create_parser().parse_args(["--cache-size", "3", "search", "gnn"])

    with patch("tools.search.search_papers", AsyncMock(return_value=result)):
        assert await async_main(args) == 0

    assert "Graph Networks" in capsys.readouterr().out
    assert get_response_cache().max_size == 3


@pytest.mark.asyncio
async def test_service_error_exit_code():
    args = create_parser().parse_args(["citations", "abc"])

    with patch("tools.citations.get_citations", AsyncMock(side_effect=APIError("boom"))):
        assert await async_main(args) == 1


@pytest.mark.asyncio
async def test_invalid_input_exit_code():
    args = create_parser().parse_args(["references", "abc"])

    with patch("tools.citations.get_references", AsyncMock(side_effect=ValueError("bad id"))):
        assert await async_main(args) == 2


def test_cache_subcommand_removed():
    with pytest.raises(SystemExit):
        create_parser().parse_args(["cache", "stats"])


@pytest.mark.asyncio
async def test_openreview_info_not_found(capsys):
    args = create_parser().parse_args(["openreview-info", "missing"])

    with patch("services.openreview.get_openreview_info", AsyncMock(return_value=None)):
        assert await async_main(args) == 1

    assert "Supported venues" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_cache_stats_flag_lists_keys(capsys):
    args = create_parser().parse_args(["--cache-stats", "related", "abc", "--limit", "3"])

    with patch("services.semantic_scholar.get_recommendations", AsyncMock(return_value=[])):
        assert await async_main(args) == 0

    out = capsys.readouterr().out
    assert "## Response cache" in out
    assert 'related:limit=3&paper_id="abc"' in out


@pytest.mark.asyncio
async def test_openreview_search_command(capsys):
    from models.openreview import OpenReviewPaper

    paper = OpenReviewPaper(id="n1", title="Sparse Attention", year=2024, decision="Accept")
    search = AsyncMock(return_value=[paper])
    args = create_parser().parse_args(["openreview", "iclr", "--year", "2024", "-l", "5"])

    with patch("services.openreview.search_openreview", search):
        assert await async_main(args) == 0

    search.assert_awaited_once_with("iclr", None, 2024, 5)
    assert "## OpenReview papers from ICLR (1 found)" in capsys.readouterr().out
