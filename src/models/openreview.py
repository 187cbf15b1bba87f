"""OpenReview submission and review models."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

OPENREVIEW_SITE = "https://openreview.net"

DECISIONS = ("Accept", "Reject", "Pending")

_FIRST_NUMBER = re.compile(r"(\d+)")
_INVITATION_YEAR = re.compile(r"/(\d{4})/")


def content_value(field_value: Any) -> Any:
    """Unwrap an API v2 ``{"value": ...}`` content field; v1 fields pass through."""
    if isinstance(field_value, dict) and "value" in field_value:
        return field_value["value"]
    return field_value


def _first_number(value: Any) -> int:
    if value is None:
        return 0
    match = _FIRST_NUMBER.search(str(value))
    return int(match.group(1)) if match else 0


def _list_field(value: Any) -> List[str]:
    value = content_value(value)
    if isinstance(value, str):
        return [line for line in value.split("\n") if line.strip()]
    if isinstance(value, list):
        return [str(v) for v in value]
    return []


def note_invitation(note: Dict[str, Any]) -> str:
    """Invitation id of a note (``invitation`` in v1, first of ``invitations`` in v2)."""
    if note.get("invitation"):
        return note["invitation"]
    invitations = note.get("invitations") or []
    return invitations[0] if invitations else ""


@dataclass
class Review:
    """One official review: numeric rating, reviewer confidence and text sections."""

    rating: int = 0
    confidence: int = 0
    summary: Optional[str] = None
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)

    @classmethod
    def from_note(cls, note: Dict[str, Any]) -> "Review":
        content = note.get("content") or {}
        rating = (
            content_value(content.get("rating"))
            or content_value(content.get("recommendation"))
            or content_value(content.get("score"))
        )
        return cls(
            rating=_first_number(rating),
            confidence=_first_number(content_value(content.get("confidence"))),
            summary=content_value(content.get("summary")) or None,
            strengths=_list_field(content.get("strengths") or content.get("pros")),
            weaknesses=_list_field(content.get("weaknesses") or content.get("cons")),
        )


def average_rating(reviews: List[Review]) -> Optional[float]:
    """Mean of the non-zero ratings rounded to one decimal, or None without reviews."""
    if not reviews:
        return None
    rated = [r.rating for r in reviews if r.rating > 0]
    if not rated:
        return 0.0
    return round(sum(rated) / len(rated), 1)


@dataclass
class OpenReviewPaper:
    """A submission on OpenReview with its decision and, optionally, its reviews."""

    id: str
    title: str
    authors: List[str] = field(default_factory=list)
    abstract: str = ""
    venue: str = ""
    year: int = 0
    decision: str = "Pending"
    reviews: List[Review] = field(default_factory=list)
    average_rating: Optional[float] = None
    pdf_url: Optional[str] = None

    @classmethod
    def from_note(cls, note: Dict[str, Any]) -> "OpenReviewPaper":
        """Create OpenReviewPaper from an ``/notes`` API note (v1 or v2 shape)."""
        content = note.get("content") or {}
        pdf = content_value(content.get("pdf"))

        return cls(
            id=note.get("id", ""),
            title=content_value(content.get("title")) or "",
            authors=_parse_authors(content.get("authors")),
            abstract=content_value(content.get("abstract")) or "",
            venue=content_value(content.get("venue")) or _venue_from_invitation(note_invitation(note)),
            year=_extract_year(note),
            decision=_extract_decision(content_value(content.get("decision"))),
            pdf_url=f"{OPENREVIEW_SITE}{pdf}" if pdf else None,
        )


def _parse_authors(authors: Any) -> List[str]:
    authors = content_value(authors)
    if not isinstance(authors, list):
        return []
    names = []
    for author in authors:
        if isinstance(author, str):
            names.append(author)
        elif isinstance(author, dict):
            names.append(author.get("value") or author.get("name") or "")
    return names


def _venue_from_invitation(invitation: str) -> str:
    # "ICLR.cc/2024/Conference/-/Submission" -> "ICLR.cc/2024"
    parts = invitation.split("/")
    if len(parts) >= 2:
        return f"{parts[0]}/{parts[1]}"
    return invitation


def _extract_year(note: Dict[str, Any]) -> int:
    content = note.get("content") or {}
    year = content_value(content.get("year"))
    if year:
        return int(year)

    match = _INVITATION_YEAR.search(note_invitation(note))
    if match:
        return int(match.group(1))

    if note.get("cdate"):
        return datetime.fromtimestamp(note["cdate"] / 1000, tz=timezone.utc).year
    return datetime.now().year


def _extract_decision(decision: Any) -> str:
    if not decision:
        return "Pending"
    lowered = str(decision).lower()
    if "accept" in lowered:
        return "Accept"
    if "reject" in lowered:
        return "Reject"
    return "Pending"
