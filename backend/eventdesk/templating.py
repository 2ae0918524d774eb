"""Placeholder filling for the messages sent to clients."""

from __future__ import annotations

from typing import Iterable

from .models import Event, Proposal, TimelineItem

PLACEHOLDERS = ("{cliente}", "{evento}", "{data}", "{cronograma}", "{link}")

DEFAULT_REVIEW_REQUEST = (
    "Hi {cliente}!\n\n"
    "I hope you enjoyed my work at *{evento}*. It was a pleasure to be part of it.\n\n"
    "Could you leave me a review? {link}\n\nThank you!"
)
DEFAULT_TIMELINE_SHARE = "*TIMELINE - {evento}*\nDate: {data}\n\n{cronograma}"
DEFAULT_PROPOSAL_SEND = "Hi {cliente}! Here is the proposal for {evento} on {data}: {link}"


def first_name(full_name: str | None) -> str:
    parts = (full_name or "").split()
    return parts[0] if parts else "Client"


def format_day(value) -> str:
    return value.strftime("%d/%m/%Y")


def render_timeline(items: Iterable[TimelineItem]) -> str:
    lines = []
    for item in items:
        line = f"*{item.time}* - {item.title}"
        if item.description:
            line += f"\n_{item.description}_"
        lines.append(line)
    return "\n\n".join(lines) or "No items"


def fill(template: str, **values: str) -> str:
    """Substitute every known placeholder; unknown braces are left alone."""

    text = template
    for key, value in values.items():
        text = text.replace("{" + key + "}", value)
    return text


def review_request(event: Event, template: str = "", link: str = "") -> str:
    return fill(
        template or DEFAULT_REVIEW_REQUEST,
        cliente=first_name(event.client_name),
        evento=event.title,
        link=link,
    )


def timeline_share(event: Event, template: str = "") -> str:
    return fill(
        template or DEFAULT_TIMELINE_SHARE,
        evento=event.title,
        data=format_day(event.date),
        cronograma=render_timeline(event.timeline),
    )


def proposal_message(proposal: Proposal, template: str = "", link: str = "") -> str:
    return fill(
        template or DEFAULT_PROPOSAL_SEND,
        cliente=first_name(proposal.client_name),
        evento=proposal.event_name,
        data=format_day(proposal.date),
        link=link,
    )


__all__ = [
    "PLACEHOLDERS",
    "fill",
    "first_name",
    "proposal_message",
    "render_timeline",
    "review_request",
    "timeline_share",
]
