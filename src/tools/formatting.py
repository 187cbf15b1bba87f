"""Markdown helpers shared by the tool formatters."""

from typing import List, Optional

from models.paper import Paper


def na(value) -> str:
    """Render a missing or zero value as ``N/A``."""
    return "N/A" if value in (None, 0, "") else str(value)


def paper_lines(paper: Paper, index: int, title_suffix: str = "", show_authors: bool = True) -> List[str]:
    """Numbered Markdown block for one paper in a result list."""
    lines = [f"{index}. **{paper.title}**{title_suffix}"]
    if show_authors:
        lines.append(f"   Authors: {', '.join(paper.author_names)}")
    citations = "N/A" if paper.citation_count is None else paper.citation_count
    lines.append(f"   Year: {na(paper.year)} | Citations: {citations}")
    if paper.venue:
        lines.append(f"   Venue: {paper.venue}")
    return lines


def paper_list(header: str, papers: List[Paper], suffixes: Optional[List[str]] = None) -> str:
    lines = [header]
    for i, paper in enumerate(papers, 1):
        suffix = suffixes[i - 1] if suffixes else ""
        lines.extend(paper_lines(paper, i, suffix))
        lines.append(f"   ID: {paper.id}")
        lines.append("")
    return "\n".join(lines)
