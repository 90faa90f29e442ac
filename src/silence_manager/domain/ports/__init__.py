"""Domain port definitions for adapters."""

from __future__ import annotations

from .metrics import MetricsPublisher, NoopMetricsPublisher
from .silencing import SilenceBackend
from .ticketing import TicketSystem

__all__ = [
    "MetricsPublisher",
    "NoopMetricsPublisher",
    "SilenceBackend",
    "TicketSystem",
]
