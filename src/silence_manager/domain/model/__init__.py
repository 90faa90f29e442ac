"""Public domain model surface."""

from __future__ import annotations

from silence_manager.domain.model.enums import AlertState, SilenceState, TicketStatus
from silence_manager.domain.model.silence import Alert, Matcher, Silence
from silence_manager.domain.model.ticket import Ticket

__all__ = [
    "Alert",
    "AlertState",
    "Matcher",
    "Silence",
    "SilenceState",
    "Ticket",
    "TicketStatus",
]
