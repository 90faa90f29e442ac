"""Port for the issue-tracking backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from silence_manager.domain.model import Ticket


@runtime_checkable
class TicketSystem(Protocol):
    """Capabilities the reconciliation engine needs from a ticket tracker."""

    def get(self, key: str) -> Ticket: ...

    def create(self, ticket: Ticket) -> str:
        """Create ``ticket`` and return its human-readable key."""
        ...

    def update(self, ticket: Ticket) -> None: ...

    def add_comment(self, key: str, text: str) -> None: ...

    def reopen(self, key: str, text: str) -> None:
        """Comment on and transition a closed/resolved ticket back to open."""
        ...

    def close(self, key: str, text: str) -> None: ...

    def is_resolved(self, ticket: Ticket) -> bool: ...

    def is_closed(self, ticket: Ticket) -> bool: ...

    def is_open(self, ticket: Ticket) -> bool: ...


__all__ = ["TicketSystem"]
