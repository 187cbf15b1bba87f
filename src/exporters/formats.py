"""CSV and JSON renderings of paper lists."""

import csv
import io
import json
from typing import List

from models.paper import Paper

CSV_HEADERS = [
    "id",
    "title",
    "authors",
    "year",
    "venue",
    "citation_count",
    "abstract",
    "arxiv_id",
    "doi",
    "url",
    "pdf_url",
]


def papers_to_csv(papers: List[Paper]) -> str:
    """Render papers as CSV with one row per paper; authors are ``;``-joined."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for paper in papers:
        writer.writerow([
            paper.id,
            paper.title,
            "; ".join(paper.author_names),
            paper.year or "",
            paper.venue or "",
            "" if paper.citation_count is None else paper.citation_count,
            paper.abstract,
            paper.arxiv_id or "",
            paper.doi or "",
            paper.url or "",
            paper.pdf_url or "",
        ])
    return buffer.getvalue().rstrip("\n")


def papers_to_json(papers: List[Paper]) -> str:
    return json.dumps([p.to_dict() for p in papers], indent=2, ensure_ascii=False)
