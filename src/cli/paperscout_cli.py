#!/usr/bin/env python3
"""PaperScout CLI - Search papers, explore citation graphs and export references."""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cache import AppContext, CacheStore, reset_app_context
from cli.output import get_output
from models.paper import SORT_OPTIONS, SearchOptions
from services.errors import ServiceError
from utils.config import Config

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> Optional[Path]:
    """Setup logging to the console and, optionally, a file.

    Args:
        verbose: If True, set DEBUG level; otherwise the configured level
        log_dir: Directory for a timestamped log file (no file if None)

    Returns:
        Path to the log file, if one was created
    """
    log_level = logging.DEBUG if verbose else getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    ))
    root_logger.addHandler(console_handler)

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"paperscout_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("arxiv").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    return log_file


async def cmd_search(args) -> int:
    from tools.search import format_search_result, search_papers

    options = SearchOptions(
        query=args.query,
        max_results=args.limit,
        sort_by=args.sort,
        year_from=args.year_from,
        year_to=args.year_to,
        venue=args.venue,
    )
    result = await search_papers(options)
    get_output("paperscout.search").info(format_search_result(result))
    return 0


async def cmd_author(args) -> int:
    from tools.search import format_author_search_result, search_by_author

    papers = await search_by_author(args.name, limit=args.limit)
    get_output("paperscout.author").info(format_author_search_result(papers, args.name))
    return 0


async def cmd_paper(args) -> int:
    from tools.details import format_paper_details, get_paper_details

    out = get_output("paperscout.paper")
    paper = await get_paper_details(args.paper_id)
    if paper is None:
        out.error(f"Paper not found: {args.paper_id}")
        return 1
    out.info(format_paper_details(paper))
    return 0


async def cmd_citations(args) -> int:
    from tools.citations import format_citations, get_citations

    citations = await get_citations(args.paper_id, limit=args.limit)
    get_output("paperscout.citations").info(format_citations(citations, args.paper_id))
    return 0


async def cmd_references(args) -> int:
    from tools.citations import format_references, get_references

    references = await get_references(args.paper_id, limit=args.limit)
    get_output("paperscout.references").info(format_references(references, args.paper_id))
    return 0


async def cmd_related(args) -> int:
    from tools.citations import format_related_papers, get_related_papers

    papers = await get_related_papers(args.paper_id, limit=args.limit)
    get_output("paperscout.related").info(format_related_papers(papers, args.paper_id))
    return 0


async def cmd_bibtex(args) -> int:
    from tools.export import export_bibtex, format_bibtex_result

    bibtex = await export_bibtex(args.paper_id)
    get_output("paperscout.bibtex").info(format_bibtex_result(bibtex, args.paper_id))
    return 0 if bibtex is not None else 1


async def cmd_export(args) -> int:
    from tools.export import export_papers, format_export_result
    from tools.search import search_papers

    result = await search_papers(SearchOptions(query=args.query, max_results=args.limit, sort_by=args.sort))
    out = get_output("paperscout.export")
    if not result.papers:
        out.warning("No papers found, nothing exported.")
        return 1

    path = export_papers(result.papers, args.format, args.output)
    out.success(format_export_result(path, args.format))
    return 0


async def cmd_openreview(args) -> int:
    from tools.openreview import format_openreview_search_result, search_openreview

    papers = await search_openreview(args.venue, query=args.query, year=args.year, limit=args.limit)
    get_output("paperscout.openreview").info(format_openreview_search_result(papers, args.venue))
    return 0


async def cmd_openreview_info(args) -> int:
    from tools.openreview import format_openreview_info, format_supported_venues, get_openreview_info

    out = get_output("paperscout.openreview")
    paper = await get_openreview_info(args.identifier)
    if paper is None:
        out.error(f"Paper not found on OpenReview: {args.identifier}")
        out.info(format_supported_venues())
        return 1
    out.info(format_openreview_info(paper))
    return 0


COMMANDS = {
    "search": cmd_search,
    "author": cmd_author,
    "paper": cmd_paper,
    "citations": cmd_citations,
    "references": cmd_references,
    "related": cmd_related,
    "bibtex": cmd_bibtex,
    "export": cmd_export,
    "openreview": cmd_openreview,
    "openreview-info": cmd_openreview_info,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="paperscout",
        description="Search academic papers on Semantic Scholar, arXiv and OpenReview",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  paperscout search "graph neural networks" --sort citations
  paperscout paper 1706.03762
  paperscout citations 1706.03762 --limit 20
  paperscout bibtex 1706.03762
  paperscout export "diffusion models" -f bibtex -o refs/diffusion
  paperscout openreview iclr --year 2024 --query "diffusion"
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-dir", type=Path, help="Also write a log file to this directory")
    parser.add_argument(
        "--cache-ttl",
        type=float,
        default=Config.CACHE_DEFAULT_TTL,
        help=f"Response cache TTL in seconds (default: {Config.CACHE_DEFAULT_TTL:g})",
    )
    parser.add_argument(
        "--cache-size",
        type=int,
        default=Config.CACHE_MAX_SIZE,
        help=f"Maximum cached responses (default: {Config.CACHE_MAX_SIZE})",
    )
    parser.add_argument("--cache-stats", action="store_true", help="Print what this run cached on exit")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    search_parser = subparsers.add_parser("search", help="Search papers by keyword")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("--limit", "-l", type=int, default=10, help="Max results (default: 10)")
    search_parser.add_argument("--sort", choices=SORT_OPTIONS, default="relevance", help="Sort order")
    search_parser.add_argument("--year-from", type=int, help="Earliest publication year")
    search_parser.add_argument("--year-to", type=int, help="Latest publication year")
    search_parser.add_argument("--venue", help="Filter by venue (Semantic Scholar only)")

    author_parser = subparsers.add_parser("author", help="Search papers by author")
    author_parser.add_argument("name", help="Author name")
    author_parser.add_argument("--limit", "-l", type=int, default=10, help="Max results (default: 10)")

    paper_parser = subparsers.add_parser("paper", help="Get detailed paper info")
    paper_parser.add_argument("paper_id", help="arXiv id, Semantic Scholar id, DOI:...")

    for name, help_text in [
        ("citations", "Get papers citing a paper"),
        ("references", "Get papers referenced by a paper"),
        ("related", "Get papers related to a paper"),
    ]:
        graph_parser = subparsers.add_parser(name, help=help_text)
        graph_parser.add_argument("paper_id", help="arXiv id, Semantic Scholar id, DOI:...")
        graph_parser.add_argument("--limit", "-l", type=int, default=10, help="Max results (default: 10)")

    bibtex_parser = subparsers.add_parser("bibtex", help="Print a BibTeX entry for a paper")
    bibtex_parser.add_argument("paper_id", help="arXiv id, Semantic Scholar id, DOI:...")

    export_parser = subparsers.add_parser("export", help="Search and export results to a file")
    export_parser.add_argument("query", help="Search query")
    export_parser.add_argument("--format", "-f", choices=["json", "csv", "bibtex"], default="bibtex")
    export_parser.add_argument("--output", "-o", required=True, help="Output file path")
    export_parser.add_argument("--limit", "-l", type=int, default=10, help="Max results (default: 10)")
    export_parser.add_argument("--sort", choices=SORT_OPTIONS, default="relevance", help="Sort order")

    openreview_parser = subparsers.add_parser("openreview", help="Search conference submissions on OpenReview")
    openreview_parser.add_argument("venue", help="neurips, iclr, icml, ... or an OpenReview group id")
    openreview_parser.add_argument("--query", "-q", help="Title search text")
    openreview_parser.add_argument("--year", type=int, help="Conference year")
    openreview_parser.add_argument("--limit", "-l", type=int, default=20, help="Max results (default: 20)")

    info_parser = subparsers.add_parser("openreview-info", help="Show an OpenReview submission with its reviews")
    info_parser.add_argument("identifier", help="OpenReview note id or paper title")

    return parser


async def async_main(args) -> int:
    """Async main entry point."""
    handler = COMMANDS.get(args.command)
    if handler is None:
        get_output("paperscout").error("No command specified. Use --help for usage.")
        return 1

    context = reset_app_context(AppContext(cache=CacheStore(max_size=args.cache_size, default_ttl=args.cache_ttl)))
    out = get_output("paperscout")
    try:
        return await handler(args)
    except ServiceError as e:
        out.error(f"Error: {e}")
        return 1
    except ValueError as e:
        out.error(f"Invalid input: {e}")
        return 2
    finally:
        if args.cache_stats:
            out.cache_stats(context.cache.get_stats())


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    log_file = setup_logging(verbose=args.verbose, log_dir=args.log_dir)
    if log_file:
        logger.info(f"Logging to {log_file}")
    logger.debug(f"Configuration: {Config.get_summary()}")
    return asyncio.run(async_main(args))


if __name__ == "__main__":
    sys.exit(main())
