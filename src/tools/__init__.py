"""Cached paper-search tools.

Every tool builds a deterministic key from its call parameters and goes
through ``cached_fetch``, so repeated lookups inside the TTL never hit the
external APIs again.
"""

from tools.citations import (
    format_citations,
    format_references,
    format_related_papers,
    get_citations,
    get_references,
    get_related_papers,
)
from tools.details import format_paper_details, get_paper_details
from tools.export import (
    export_bibtex,
    export_papers,
    export_papers_by_id,
    format_bibtex_result,
    format_export_result,
)
from tools.maintenance import clear_cache, format_cache_stats
from tools.openreview import (
    format_openreview_info,
    format_openreview_search_result,
    format_supported_venues,
    get_openreview_info,
    search_openreview,
)
from tools.search import (
    format_author_search_result,
    format_search_result,
    search_by_author,
    search_papers,
)

__all__ = [
    "search_papers",
    "search_by_author",
    "format_search_result",
    "format_author_search_result",
    "get_paper_details",
    "format_paper_details",
    "get_citations",
    "get_references",
    "get_related_papers",
    "format_citations",
    "format_references",
    "format_related_papers",
    "export_papers",
    "export_papers_by_id",
    "export_bibtex",
    "format_export_result",
    "format_bibtex_result",
    "search_openreview",
    "get_openreview_info",
    "format_openreview_search_result",
    "format_openreview_info",
    "format_supported_venues",
    "clear_cache",
    "format_cache_stats",
]
