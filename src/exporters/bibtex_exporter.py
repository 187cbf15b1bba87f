"""BibTeX exporter for PaperScout.

Generates BibTeX entries from paper metadata.
Supports automatic entry type detection and proper escaping.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Dict, List

from models.paper import Paper

# Field order in rendered entries; unknown fields are never emitted
FIELD_ORDER = [
    "title", "author", "booktitle", "journal", "year",
    "doi", "url", "eprint", "archiveprefix", "primaryclass",
]

CONFERENCE_KEYWORDS = [
    "conference", "proceedings", "workshop", "symposium",
    "neurips", "nips", "icml", "iclr", "cvpr", "iccv", "eccv",
    "acl", "emnlp", "naacl", "aaai", "ijcai", "kdd", "www",
    "sigir", "cikm", "wsdm", "icse", "fse", "ase",
]

# Fields holding identifiers or URLs are emitted verbatim
_RAW_FIELDS = {"doi", "url", "eprint"}


@dataclass
class BibTeXEntry:
    """A single BibTeX entry."""

    entry_type: str  # article, inproceedings, misc
    cite_key: str
    fields: Dict[str, str]

    def to_bibtex(self) -> str:
        """Convert to BibTeX string format."""
        lines = [f"@{self.entry_type}{{{self.cite_key},"]
        for key in FIELD_ORDER:
            value = self.fields.get(key)
            if not value:
                continue
            rendered = value if key in _RAW_FIELDS else escape_bibtex(value)
            if key == "title":
                # Double braces keep capitalisation of acronyms
                rendered = f"{{{rendered}}}"
            lines.append(f"  {key} = {{{rendered}}},")
        if len(lines) > 1:
            lines[-1] = lines[-1].rstrip(",")
        lines.append("}")
        return "\n".join(lines)


def escape_bibtex(text: str) -> str:
    """Escape special LaTeX/BibTeX characters.

    Args:
        text: Raw text to escape

    Returns:
        Text with special characters escaped
    """
    if not text:
        return ""

    replacements = [
        ("&", r"\&"),
        ("%", r"\%"),
        ("$", r"\$"),
        ("#", r"\#"),
        ("_", r"\_"),
        ("{", r"\{"),
        ("}", r"\}"),
        ("~", r"\textasciitilde{}"),
        ("^", r"\textasciicircum{}"),
    ]

    result = text
    for old, new in replacements:
        # Don't escape if already escaped
        result = re.sub(rf"(?<!\\){re.escape(old)}", lambda _m, new=new: new, result)

    return result


def generate_cite_key(paper: Paper) -> str:
    """Generate a citation key for a paper.

    Format: firstauthorlastname + year + first significant title word,
    e.g. ``vaswani2017attention``.
    """
    if paper.authors:
        parts = paper.authors[0].name.split()
        last_name = parts[-1] if parts else "unknown"
    else:
        last_name = "unknown"

    # Normalize: remove accents, special chars
    last_name = unicodedata.normalize("NFKD", last_name)
    last_name = last_name.encode("ascii", "ignore").decode("ascii")
    last_name = re.sub(r"[^a-zA-Z]", "", last_name) or "unknown"

    year_str = str(paper.year) if paper.year else "nodate"

    title_words = re.sub(r"[^\w\s]", "", paper.title).split()
    stop_words = {"a", "an", "the", "on", "in", "of", "for", "to", "with"}
    first_word = "paper"
    for word in title_words:
        if word.lower() not in stop_words:
            first_word = re.sub(r"[^a-zA-Z]", "", word) or "paper"
            break

    return f"{last_name}{year_str}{first_word}".lower()


def detect_entry_type(paper: Paper) -> str:
    """Detect the appropriate BibTeX entry type.

    Returns:
        ``inproceedings`` for known conferences, ``article`` for any other
        venue, ``misc`` for preprints and unknown venues
    """
    if not paper.venue:
        return "misc"

    venue = paper.venue.lower()
    if any(re.search(rf"\b{re.escape(kw)}\b", venue) for kw in CONFERENCE_KEYWORDS):
        return "inproceedings"
    if "arxiv" in venue:
        return "misc"
    return "article"


def paper_to_bibtex(paper: Paper) -> BibTeXEntry:
    """Generate a BibTeX entry from paper metadata."""
    entry_type = detect_entry_type(paper)
    fields: Dict[str, str] = {
        "title": paper.title,
        "author": " and ".join(paper.author_names),
        "year": str(paper.year) if paper.year else "",
    }

    if entry_type == "inproceedings":
        fields["booktitle"] = paper.venue or ""
    elif entry_type == "article":
        fields["journal"] = paper.venue or ""

    if paper.arxiv_id:
        fields["eprint"] = paper.arxiv_id
        fields["archiveprefix"] = "arXiv"
        if paper.categories:
            fields["primaryclass"] = paper.categories[0]

    if paper.doi:
        fields["doi"] = paper.doi
    if paper.url:
        fields["url"] = paper.url

    return BibTeXEntry(entry_type=entry_type, cite_key=generate_cite_key(paper), fields=fields)


def paper_to_bibtex_string(paper: Paper) -> str:
    return paper_to_bibtex(paper).to_bibtex()


def papers_to_bibtex(papers: List[Paper]) -> str:
    """Render several papers as one .bib file, keeping citation keys unique."""
    used_keys: set = set()
    rendered = []
    for paper in papers:
        entry = paper_to_bibtex(paper)
        key = entry.cite_key
        suffix = ord("a")
        while key in used_keys:
            key = f"{entry.cite_key}{chr(suffix)}"
            suffix += 1
        used_keys.add(key)
        entry.cite_key = key
        rendered.append(entry.to_bibtex())
    return "\n\n".join(rendered)
