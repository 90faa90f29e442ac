"""Remediation tickets and their status classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003

from .enums import TicketStatus

_CLOSED_STATUSES = frozenset({TicketStatus.CLOSED, TicketStatus.RESOLVED})
_OPEN_STATUSES = frozenset({TicketStatus.OPEN, TicketStatus.IN_PROGRESS})


@dataclass(slots=True, kw_only=True)
class Ticket:
    """A tracked unit of remediation work.

    ``silence_ref`` is parsed from the description and is advisory only: the
    referenced silence may have been deleted or expired since it was written.
    """

    key: str
    status: TicketStatus = TicketStatus.OPEN
    id: str = ""
    summary: str = ""
    description: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    silence_ref: str = ""
    labels: list[str] = field(default_factory=list[str])
    assignee: str = ""

    # REOPENED belongs to none of the groups below.

    @property
    def is_resolved(self) -> bool:
        return self.status is TicketStatus.RESOLVED

    @property
    def is_closed(self) -> bool:
        return self.status in _CLOSED_STATUSES

    @property
    def is_open(self) -> bool:
        return self.status in _OPEN_STATUSES
