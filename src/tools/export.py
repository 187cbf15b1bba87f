"""Export tools writing paper lists to disk or rendering BibTeX."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from cache import CacheStore
from exporters import paper_to_bibtex_string, papers_to_bibtex, papers_to_csv, papers_to_json
from models.paper import Paper
from tools.details import get_paper_details

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    "json": (papers_to_json, ".json"),
    "csv": (papers_to_csv, ".csv"),
    "bibtex": (papers_to_bibtex, ".bib"),
}


def export_papers(papers: List[Paper], fmt: str, output_path: Union[str, Path]) -> Path:
    """
    Write papers to ``output_path`` in the given format.

    The format's extension is appended when missing and parent directories
    are created.

    Args:
        papers: Papers to export
        fmt: One of ``json``, ``csv``, ``bibtex``
        output_path: Destination file

    Returns:
        Path actually written

    Raises:
        ValueError: If ``fmt`` is not supported
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported format: {fmt} (choose from {', '.join(EXPORT_FORMATS)})")

    render, extension = EXPORT_FORMATS[fmt]
    path = Path(output_path)
    if path.suffix.lower() != extension:
        path = path.with_name(path.name + extension)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render(papers), encoding="utf-8")
    logger.info(f"Exported {len(papers)} papers to {path}")
    return path


async def export_papers_by_id(
    paper_ids: List[str],
    fmt: str,
    output_path: Union[str, Path],
    store: Optional[CacheStore] = None,
) -> Path:
    """
    Look up each id through the cached details tool and export the papers found.

    Ids no source knows are logged and skipped.

    Raises:
        ValueError: If ``fmt`` is not supported
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported format: {fmt} (choose from {', '.join(EXPORT_FORMATS)})")

    papers = []
    for paper_id in paper_ids:
        paper = await get_paper_details(paper_id, store=store)
        if paper is None:
            logger.warning(f"Skipping unknown paper id: {paper_id}")
            continue
        papers.append(paper)
    return export_papers(papers, fmt, output_path)


async def export_bibtex(paper_id: str, store: Optional[CacheStore] = None) -> Optional[str]:
    """BibTeX entry for one paper, or None if it cannot be found."""
    paper = await get_paper_details(paper_id, store=store)
    if paper is None:
        return None
    return paper_to_bibtex_string(paper)


def format_export_result(path: Path, fmt: str) -> str:
    return f"Successfully exported papers to {fmt.upper()} format\nSaved to: {path}"


def format_bibtex_result(bibtex: Optional[str], paper_id: str) -> str:
    if bibtex is None:
        return f"Failed to generate BibTeX for {paper_id}\nError: Paper not found: {paper_id}"
    return (
        f"## BibTeX for {paper_id}\n\n```bibtex\n{bibtex}\n```\n\n"
        "You can copy this BibTeX entry to your reference manager."
    )
