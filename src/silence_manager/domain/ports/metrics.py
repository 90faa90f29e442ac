"""Port for observability sinks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime


@runtime_checkable
class MetricsPublisher(Protocol):
    def record_build_info(self, version: str, commit: str, build_date: str) -> None: ...

    def record_check(self, silence_id: str, ticket_key: str, at: datetime) -> None: ...

    def record_expiry(self, silence_id: str, ticket_key: str, expires_at: datetime) -> None: ...

    def flush(self) -> None:
        """Send everything recorded so far to the backend."""
        ...

    def close(self) -> None: ...


class NoopMetricsPublisher:
    """Publisher used when metrics are disabled."""

    def record_build_info(self, version: str, commit: str, build_date: str) -> None:
        del version, commit, build_date

    def record_check(self, silence_id: str, ticket_key: str, at: datetime) -> None:
        del silence_id, ticket_key, at

    def record_expiry(self, silence_id: str, ticket_key: str, expires_at: datetime) -> None:
        del silence_id, ticket_key, expires_at

    def flush(self) -> None:
        return None

    def close(self) -> None:
        return None


if TYPE_CHECKING:
    _publisher_check: MetricsPublisher = NoopMetricsPublisher()


__all__ = ["MetricsPublisher", "NoopMetricsPublisher"]
