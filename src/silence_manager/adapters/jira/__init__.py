"""Public interface for the Jira adapter."""

from __future__ import annotations

from .client import JiraAPIError, JiraClient, TicketNotFoundError
from .schema import AdfDocument, IssuePayload, TransitionPayload
from .translator import map_status, parse_ticket, ticket_to_payload

__all__ = [
    "AdfDocument",
    "IssuePayload",
    "JiraAPIError",
    "JiraClient",
    "TicketNotFoundError",
    "TransitionPayload",
    "map_status",
    "parse_ticket",
    "ticket_to_payload",
]
