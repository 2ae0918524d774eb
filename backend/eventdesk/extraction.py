"""Best-effort proposal drafts from free text (e.g. a pasted chat message).

A draft only pre-fills the proposal form. Nothing here is trusted: the fields
still go through :meth:`ProposalPipeline.create` validation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(
    r"(?:my name is|i am|i'm|this is|sou|chamo|aqui é|fala com)\s+(?:o\s+|a\s+)?([A-ZÀ-Ý][\wÀ-ÿ]+)",
    re.IGNORECASE,
)
_SERVICE_RE = re.compile(
    r"\b(dj|photography|fotografia|decoration|decoração|lighting|iluminação|sound|som|band|banda|"
    r"wedding|casamento|15 anos)\b",
    re.IGNORECASE,
)
_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b")


@dataclass(frozen=True)
class ProposalDraft:
    client_name: Optional[str] = None
    event_name: Optional[str] = None
    event_date: Optional[date] = None
    service_type: Optional[str] = None


class TextExtractor(Protocol):
    def __call__(self, text: str) -> ProposalDraft:
        ...


def _parse_day(match: re.Match, today: date) -> date | None:
    day, month, year = match.group(1), match.group(2), match.group(3)
    if year is None:
        full_year = today.year
    elif len(year) == 2:
        full_year = 2000 + int(year)
    else:
        full_year = int(year)
    try:
        return date(full_year, int(month), int(day))
    except ValueError:
        return None


def extract_locally(text: str, *, today: date | None = None) -> ProposalDraft:
    """Regex fallback: DD/MM[/YY] dates, a name after an introduction, a service keyword."""

    today = today or date.today()
    name = _NAME_RE.search(text)
    service = _SERVICE_RE.search(text)
    day = _DATE_RE.search(text)
    return ProposalDraft(
        client_name=name.group(1) if name else None,
        event_name=f"{service.group(1).title()} event" if service else "New event",
        event_date=(_parse_day(day, today) if day else None) or today,
        service_type=service.group(1) if service else None,
    )


def extract_draft(text: str, extractor: Callable[[str], ProposalDraft] | None = None) -> ProposalDraft:
    """Use ``extractor`` when given, falling back to :func:`extract_locally` if it fails."""

    if extractor is None:
        return extract_locally(text)
    try:
        return extractor(text)
    except Exception:  # collaborator is best-effort
        logger.warning("Text extractor failed; using local fallback", exc_info=True)
        return extract_locally(text)


__all__ = ["ProposalDraft", "TextExtractor", "extract_draft", "extract_locally"]
