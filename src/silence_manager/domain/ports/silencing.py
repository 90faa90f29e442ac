"""Port for the alert-silencing backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from silence_manager.domain.model import Alert, Matcher, Silence


@runtime_checkable
class SilenceBackend(Protocol):
    """Capabilities the reconciliation engine needs from an alert silencer.

    Silences returned by this port carry a resolved ``ticket_ref``; decoding the
    coupling marker is the adapter's job.
    """

    def list_active(self) -> list[Silence]:
        """Return all active or pending silences."""
        ...

    def get(self, silence_id: str) -> Silence: ...

    def create(self, silence: Silence) -> str:
        """Create ``silence`` and return the id assigned by the backend."""
        ...

    def update(self, silence: Silence) -> None: ...

    def set_end_time(self, silence_id: str, ends_at: datetime) -> None: ...

    def delete(self, silence_id: str) -> None: ...

    def query_firing(self, matchers: Sequence[Matcher] | None = None) -> list[Alert]:
        """Return currently firing alerts matching every matcher (all when ``None``)."""
        ...


__all__ = ["SilenceBackend"]
