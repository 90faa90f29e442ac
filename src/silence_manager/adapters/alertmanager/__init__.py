"""Public interface for the Alertmanager adapter."""

from __future__ import annotations

from .client import AlertmanagerAPIError, AlertmanagerClient, SilenceNotFoundError
from .schema import AlertPayload, MatcherPayload, SilencePayload
from .translator import matcher_applies, parse_alert, parse_silence, parse_ticket_ref

__all__ = [
    "AlertPayload",
    "AlertmanagerAPIError",
    "AlertmanagerClient",
    "MatcherPayload",
    "SilenceNotFoundError",
    "SilencePayload",
    "matcher_applies",
    "parse_alert",
    "parse_silence",
    "parse_ticket_ref",
]
