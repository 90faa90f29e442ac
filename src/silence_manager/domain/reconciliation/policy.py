"""Per-silence decision rule.

The rule only looks at the ticket classification and the time left on the
silence, so it is kept free of any backend access.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum


class SilenceAction(StrEnum):
    """Corrective action chosen for one coupled silence."""

    NONE = "none"
    DELETE = "delete"
    EXTEND = "extend"
    EXTEND_EXPIRED = "extend_expired"


@dataclass(frozen=True, slots=True)
class ReconcileSettings:
    expiry_threshold: timedelta = timedelta(hours=24)
    extension_duration: timedelta = timedelta(days=7)
    default_silence_duration: timedelta = timedelta(days=7)
    check_alerts: bool = True


def decide_silence_action(
    *,
    ticket_resolved: bool,
    ticket_open: bool,
    until_expiry: timedelta,
    expiry_threshold: timedelta,
) -> SilenceAction:
    """Pick the action for a silence; the first matching rule wins.

    1. resolved ticket: delete the silence
    2. open ticket, silence expiring within ``expiry_threshold``: extend
    3. open ticket, silence already expired: extend
    4. anything else: leave it alone
    """

    if ticket_resolved:
        return SilenceAction.DELETE
    if ticket_open:
        if timedelta(0) < until_expiry < expiry_threshold:
            return SilenceAction.EXTEND
        if until_expiry <= timedelta(0):
            return SilenceAction.EXTEND_EXPIRED
    return SilenceAction.NONE


__all__ = ["ReconcileSettings", "SilenceAction", "decide_silence_action"]
