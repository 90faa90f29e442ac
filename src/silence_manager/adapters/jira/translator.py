"""Translate Jira issue payloads into domain tickets and back."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from silence_manager.domain.coupling import embed, extract
from silence_manager.domain.model import Ticket, TicketStatus

from .schema import AdfBlock, AdfDocument, AdfText, IssueFields, IssuePayload

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .schema import TransitionPayload, UserPayload

DESCRIPTION_SEPARATOR = "\n\n"

# Checked in order; the first group with a matching substring wins.
_STATUS_KEYWORDS: tuple[tuple[tuple[str, ...], TicketStatus], ...] = (
    (("open", "to do"), TicketStatus.OPEN),
    (("in progress", "in review"), TicketStatus.IN_PROGRESS),
    (("resolved", "done"), TicketStatus.RESOLVED),
    (("closed",), TicketStatus.CLOSED),
    (("reopen",), TicketStatus.REOPENED),
)

REOPEN_TRANSITION_NAMES = frozenset({"reopen"})
REOPEN_TARGET_STATUSES = frozenset({"open", "reopened", "to do"})
CLOSE_TRANSITION_NAMES = frozenset({"close", "done"})
CLOSE_TARGET_STATUSES = frozenset({"closed", "done"})


def map_status(name: str) -> TicketStatus:
    """Classify a workflow status name; unknown names count as open."""

    lowered = name.lower()
    for keywords, status in _STATUS_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return status
    return TicketStatus.OPEN


def description_text(document: AdfDocument | None) -> str:
    """Flatten the text nodes of an ADF document, one line per node."""

    if document is None:
        return ""
    parts = [node.text for block in document.content for node in block.content if node.text]
    return "\n".join(parts)


def build_document(text: str) -> AdfDocument:
    return AdfDocument(content=[AdfBlock(content=[AdfText(text=text)])])


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _assignee_name(user: UserPayload | None) -> str:
    if user is None:
        return ""
    return user.name or user.account_id or ""


def _strip_coupling_line(description: str, silence_ref: str) -> str:
    if not silence_ref:
        return description
    _line, _newline, rest = description.partition("\n")
    return rest.removeprefix("\n")


def parse_ticket(payload: IssuePayload | Mapping[str, object], *, prefix: str) -> Ticket:
    model = payload if isinstance(payload, IssuePayload) else IssuePayload.model_validate(payload)
    fields = model.fields
    text = description_text(fields.description)
    silence_ref = extract(text, prefix)
    return Ticket(
        key=model.key or "",
        id=model.id or "",
        summary=fields.summary or "",
        # The coupling line is re-added from ``silence_ref`` on write.
        description=_strip_coupling_line(text, silence_ref),
        status=map_status(fields.status.name) if fields.status else TicketStatus.OPEN,
        created_at=_parse_timestamp(fields.created),
        updated_at=_parse_timestamp(fields.updated),
        silence_ref=silence_ref,
        labels=list(fields.labels or []),
        assignee=_assignee_name(fields.assignee),
    )


def ticket_to_payload(ticket: Ticket, *, prefix: str) -> IssuePayload:
    description = embed(
        ticket.description,
        prefix,
        ticket.silence_ref,
        separator=DESCRIPTION_SEPARATOR,
    )
    return IssuePayload(
        fields=IssueFields(
            summary=ticket.summary or None,
            description=build_document(description),
            labels=list(ticket.labels) or None,
        )
    )


def _select_transition(
    transitions: list[TransitionPayload],
    *,
    names: frozenset[str],
    targets: frozenset[str],
) -> TransitionPayload | None:
    for transition in transitions:
        if transition.name.lower() in names or transition.to.name.lower() in targets:
            return transition
    return None


def select_reopen_transition(transitions: list[TransitionPayload]) -> TransitionPayload | None:
    return _select_transition(
        transitions, names=REOPEN_TRANSITION_NAMES, targets=REOPEN_TARGET_STATUSES
    )


def select_close_transition(transitions: list[TransitionPayload]) -> TransitionPayload | None:
    return _select_transition(
        transitions, names=CLOSE_TRANSITION_NAMES, targets=CLOSE_TARGET_STATUSES
    )


__all__ = [
    "build_document",
    "description_text",
    "map_status",
    "parse_ticket",
    "select_close_transition",
    "select_reopen_transition",
    "ticket_to_payload",
]
