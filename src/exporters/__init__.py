"""Exporters for PaperScout paper lists.

This module provides various export formats:
- BibTeX citations
- CSV
- JSON
"""

from exporters.bibtex_exporter import (
    BibTeXEntry,
    detect_entry_type,
    escape_bibtex,
    generate_cite_key,
    paper_to_bibtex,
    paper_to_bibtex_string,
    papers_to_bibtex,
)
from exporters.formats import papers_to_csv, papers_to_json

__all__ = [
    # BibTeX
    "BibTeXEntry",
    "detect_entry_type",
    "escape_bibtex",
    "generate_cite_key",
    "paper_to_bibtex",
    "paper_to_bibtex_string",
    "papers_to_bibtex",
    # Tabular / structured
    "papers_to_csv",
    "papers_to_json",
]
