"""Paper models shared by the Semantic Scholar and arXiv services."""

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

SEMANTIC_SCHOLAR_PAPER_URL = "https://www.semanticscholar.org/paper/{paper_id}"
ARXIV_ABS_URL = "https://arxiv.org/abs/{arxiv_id}"
ARXIV_PDF_URL = "https://arxiv.org/pdf/{arxiv_id}.pdf"

SORT_OPTIONS = ("relevance", "date", "citations")

_ARXIV_VERSION = re.compile(r"v\d+$")


def strip_arxiv_version(arxiv_id: str) -> str:
    """Drop a trailing version suffix, e.g. ``1706.03762v5`` -> ``1706.03762``."""
    return _ARXIV_VERSION.sub("", arxiv_id)


@dataclass
class Author:
    """A paper author."""

    name: str
    author_id: Optional[str] = None
    affiliations: List[str] = field(default_factory=list)


@dataclass
class Paper:
    """Metadata for a paper from Semantic Scholar, arXiv, or both merged.

    ``id`` is the Semantic Scholar paper id or, for arXiv-only papers,
    the arXiv id.
    """

    id: str
    title: str
    authors: List[Author] = field(default_factory=list)
    abstract: str = ""
    year: int = 0
    venue: Optional[str] = None
    citation_count: Optional[int] = None
    reference_count: Optional[int] = None
    pdf_url: Optional[str] = None
    arxiv_id: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    publication_date: Optional[str] = None
    categories: List[str] = field(default_factory=list)

    @property
    def author_names(self) -> List[str]:
        return [a.name for a in self.authors]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)

    @classmethod
    def from_semantic_scholar(cls, data: Dict[str, Any]) -> "Paper":
        """Create Paper from a Semantic Scholar Graph API paper object."""
        external_ids = data.get("externalIds") or {}
        open_access_pdf = data.get("openAccessPdf") or {}
        paper_id = data.get("paperId") or ""

        return cls(
            id=paper_id,
            title=data.get("title") or "",
            authors=[
                Author(name=a.get("name", ""), author_id=a.get("authorId"))
                for a in (data.get("authors") or [])
            ],
            abstract=data.get("abstract") or "",
            year=data.get("year") or 0,
            venue=data.get("venue") or None,
            citation_count=data.get("citationCount"),
            reference_count=data.get("referenceCount"),
            arxiv_id=external_ids.get("ArXiv"),
            doi=external_ids.get("DOI"),
            pdf_url=open_access_pdf.get("url"),
            publication_date=data.get("publicationDate"),
            url=SEMANTIC_SCHOLAR_PAPER_URL.format(paper_id=paper_id),
        )

    @classmethod
    def from_arxiv_result(cls, result) -> "Paper":
        """Create Paper from an ``arxiv.Result``."""
        arxiv_id = result.get_short_id()

        categories: List[str] = []
        if result.primary_category:
            categories.append(result.primary_category)
        for cat in result.categories or []:
            if cat not in categories:
                categories.append(cat)

        published = result.published
        return cls(
            id=arxiv_id,
            arxiv_id=arxiv_id,
            title=" ".join(result.title.split()),
            abstract=" ".join(result.summary.split()),
            authors=[Author(name=author.name) for author in result.authors],
            year=published.year if published else 0,
            publication_date=published.isoformat() if published else None,
            pdf_url=result.pdf_url or ARXIV_PDF_URL.format(arxiv_id=arxiv_id),
            url=ARXIV_ABS_URL.format(arxiv_id=arxiv_id),
            doi=result.doi,
            categories=categories,
        )


@dataclass
class Citation:
    """A citing or cited paper plus Semantic Scholar's influence flag."""

    paper: Paper
    is_influential: bool = False


@dataclass
class SearchOptions:
    """Keyword search parameters understood by every search backend."""

    query: str
    max_results: int = 10
    sort_by: str = "relevance"
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    venue: Optional[str] = None
    offset: int = 0

    def __post_init__(self):
        if self.sort_by not in SORT_OPTIONS:
            raise ValueError(f"sort_by must be one of {SORT_OPTIONS}, got {self.sort_by!r}")


@dataclass
class SearchResult:
    """One page of search results."""

    papers: List[Paper]
    total_results: int
    offset: int = 0
    limit: int = 10
