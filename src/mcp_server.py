"""PaperScout MCP Server.

Exposes the cached paper-search tools to MCP clients (Claude Desktop,
Cursor, etc.) via stdio or streamable-http transport. The response cache
lives as long as the server process, so repeated lookups are answered
from memory until their TTL runs out.

Usage:
    paperscout-mcp                  # stdio transport (default)
    paperscout-mcp --http 8080      # streamable-http on port 8080
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from fastmcp import FastMCP

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import tools
from models.paper import SearchOptions
from utils.config import Config

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "paperscout",
    instructions=(
        "Search papers on Semantic Scholar, arXiv and OpenReview, walk citation "
        "graphs and export references. Results are cached in memory; call "
        "clear_cache to force fresh lookups."
    ),
)

MAX_RESULTS = 100


async def search_papers(
    query: str,
    max_results: int = 10,
    sort_by: str = "relevance",
    year_from: Optional[int] = None,
    year_to: Optional[int] = None,
    venue: Optional[str] = None,
) -> str:
    """Search academic papers on Semantic Scholar and arXiv.

    Args:
        query: Search query
        max_results: Maximum number of results (default: 10, max: 100)
        sort_by: "relevance", "date" or "citations"
        year_from: Earliest publication year
        year_to: Latest publication year
        venue: Venue filter (Semantic Scholar only)
    """
    options = SearchOptions(
        query=query,
        max_results=min(max_results, MAX_RESULTS),
        sort_by=sort_by,
        year_from=year_from,
        year_to=year_to,
        venue=venue,
    )
    return tools.format_search_result(await tools.search_papers(options))


async def get_paper_details(paper_id: str) -> str:
    """Get detailed information about a paper.

    Args:
        paper_id: arXiv id ("1706.03762"), Semantic Scholar id or "DOI:..."
    """
    paper = await tools.get_paper_details(paper_id)
    if paper is None:
        return f"Paper not found: {paper_id}"
    return tools.format_paper_details(paper)


async def search_by_author(author_name: str, limit: int = 10) -> str:
    """Search papers by author name, newest first."""
    papers = await tools.search_by_author(author_name, min(limit, MAX_RESULTS))
    return tools.format_author_search_result(papers, author_name)


async def get_citations(paper_id: str, limit: int = 10) -> str:
    """Get papers that cite the given paper."""
    citations = await tools.get_citations(paper_id, min(limit, MAX_RESULTS))
    return tools.format_citations(citations, paper_id)


async def get_references(paper_id: str, limit: int = 10) -> str:
    """Get papers referenced by the given paper."""
    references = await tools.get_references(paper_id, min(limit, MAX_RESULTS))
    return tools.format_references(references, paper_id)


async def get_related_papers(paper_id: str, limit: int = 10) -> str:
    """Get papers related through citations and references, influential ones first."""
    papers = await tools.get_related_papers(paper_id, min(limit, MAX_RESULTS))
    return tools.format_related_papers(papers, paper_id)


async def export_papers(paper_ids: List[str], output_path: str, format: str = "bibtex") -> str:
    """Export papers to a file.

    Args:
        paper_ids: Paper ids to export
        output_path: Destination file; the extension is added when missing
        format: "bibtex", "csv" or "json"
    """
    path = await tools.export_papers_by_id(paper_ids, format, output_path)
    return tools.format_export_result(path, format)


async def export_bibtex(paper_id: str) -> str:
    """Generate a BibTeX entry for one paper."""
    return tools.format_bibtex_result(await tools.export_bibtex(paper_id), paper_id)


async def search_openreview(
    venue: str,
    query: Optional[str] = None,
    year: Optional[int] = None,
    limit: int = 20,
) -> str:
    """Search conference submissions on OpenReview.

    Args:
        venue: "neurips", "iclr", "icml", ... or an OpenReview group id
        query: Title search text
        year: Conference year
        limit: Maximum number of papers (default: 20, max: 100)
    """
    papers = await tools.search_openreview(venue, query, year, min(limit, MAX_RESULTS))
    return tools.format_openreview_search_result(papers, venue)


async def get_openreview_info(identifier: str) -> str:
    """Get an OpenReview submission with its decision and reviews.

    Args:
        identifier: OpenReview note id or paper title
    """
    paper = await tools.get_openreview_info(identifier)
    if paper is None:
        return f"Paper not found on OpenReview: {identifier}\n\n{tools.format_supported_venues()}"
    return tools.format_openreview_info(paper)


async def clear_cache(pattern: Optional[str] = None) -> str:
    """Clear the search cache to get fresh results.

    Args:
        pattern: Optional regex; only matching cache keys are cleared
    """
    return tools.clear_cache(pattern)


async def cache_stats() -> str:
    """Show how many responses are cached and under which keys."""
    return tools.format_cache_stats()


TOOLS = [
    search_papers,
    get_paper_details,
    search_by_author,
    get_citations,
    get_references,
    get_related_papers,
    export_papers,
    export_bibtex,
    search_openreview,
    get_openreview_info,
    clear_cache,
    cache_stats,
]

for _tool in TOOLS:
    mcp.tool()(_tool)


def main():
    """Run the PaperScout MCP server."""
    import argparse

    from cli.paperscout_cli import setup_logging

    parser = argparse.ArgumentParser(description="PaperScout MCP Server")
    parser.add_argument(
        "--http",
        type=int,
        metavar="PORT",
        help="Run with streamable-http transport on PORT",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose)
    logger.debug(f"Configuration: {Config.get_summary()}")

    if args.http:
        mcp.run(transport="streamable-http", host="0.0.0.0", port=args.http)
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
