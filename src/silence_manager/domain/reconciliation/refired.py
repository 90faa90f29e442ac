"""Restart the remediation cycle for alerts that fire again after ticket closure."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Final

from silence_manager.domain.clock import Clock, utcnow
from silence_manager.domain.model import Matcher, Silence

from .result import step_error

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from silence_manager.domain.model import Alert, Ticket
    from silence_manager.domain.ports import SilenceBackend, TicketSystem

    from .result import ReconcileResult

log = getLogger(__name__)

TICKET_LABEL: Final = "ticket"
SILENCE_ID_LABEL: Final = "silence_id"
SILENCE_CREATOR: Final = "silence-manager"
RECREATED_SILENCE_COMMENT: Final = "Automatically recreated for refired alert"

# Copying arbitrary labels would silence a broader or narrower set of series.
MATCHER_LABELS: Final = ("alertname", "job", "instance", "severity")


def format_labels(labels: Mapping[str, str]) -> str:
    pairs = ", ".join(f'{name}="{labels[name]}"' for name in sorted(labels))
    return f"{{{pairs}}}"


def matchers_from_alert(alert: Alert) -> list[Matcher]:
    """Build equality matchers for the allow-listed labels present on ``alert``."""

    return [
        Matcher(name=label, value=alert.labels[label], is_regex=False, is_equal=True)
        for label in MATCHER_LABELS
        if label in alert.labels
    ]


@dataclass(slots=True)
class RefiredAlertDetector:
    """Reopen closed tickets whose alert is firing again and silence it anew."""

    silences: SilenceBackend
    tickets: TicketSystem
    default_silence_duration: timedelta = timedelta(days=7)
    clock: Clock = field(default=utcnow)

    def check(self, result: ReconcileResult) -> None:
        """Inspect a full alert snapshot and record outcomes into ``result``.

        A failing alert query is recorded as one error; it never aborts the run.
        """

        try:
            alerts = self.silences.query_firing(None)
        except Exception as exc:  # noqa: BLE001
            error = result.add_error(
                "check refired alerts", step_error("failed to get alerts", exc)
            )
            log.error("Error checking refired alerts: %s", error)
            return

        log.info("Checking %d active alerts for closed tickets", len(alerts))

        handled: set[str] = set()
        for alert in alerts:
            ticket_ref = alert.labels.get(TICKET_LABEL)
            if not ticket_ref or ticket_ref in handled:
                continue

            try:
                ticket = self.tickets.get(ticket_ref)
            except Exception as exc:  # noqa: BLE001
                log.warning("Failed to get ticket %s for alert: %s", ticket_ref, exc)
                continue

            if not self.tickets.is_closed(ticket):
                continue
            if self._has_active_silence(alert):
                log.debug("Ticket %s is closed but alert is still silenced", ticket.key)
                continue

            handled.add(ticket_ref)
            self._restart(alert, ticket, result)

    def _has_active_silence(self, alert: Alert) -> bool:
        silence_id = alert.labels.get(SILENCE_ID_LABEL)
        if not silence_id:
            return False
        try:
            silence = self.silences.get(silence_id)
        except Exception as exc:  # noqa: BLE001
            log.debug("Silence %s referenced by alert could not be loaded: %s", silence_id, exc)
            return False
        return self.clock() < silence.ends_at

    def _restart(self, alert: Alert, ticket: Ticket, result: ReconcileResult) -> None:
        log.info("Alert refired for closed ticket %s, reopening and creating silence", ticket.key)

        message = (
            "Alert has refired. Automatically reopening ticket and creating new silence."
            f"\n\nAlert: {format_labels(alert.labels)}"
        )
        try:
            self.tickets.reopen(ticket.key, message)
        except Exception as exc:  # noqa: BLE001
            log.error("Error reopening ticket %s: %s", ticket.key, exc)
            result.add_error(ticket.key, step_error("failed to reopen ticket", exc))
            return
        result.tickets_reopened += 1

        silence = self._replacement_silence(alert, ticket.key, now=self.clock())
        try:
            silence_id = self.silences.create(silence)
        except Exception as exc:  # noqa: BLE001
            log.error("Error creating silence for ticket %s: %s", ticket.key, exc)
            result.add_error(ticket.key, step_error("failed to create silence", exc))
            return
        result.silences_created += 1
        log.info("Created new silence %s for reopened ticket %s", silence_id, ticket.key)

        try:
            self.tickets.add_comment(ticket.key, f"New silence created: {silence_id}")
        except Exception as exc:  # noqa: BLE001
            log.warning("Failed to add comment to ticket %s: %s", ticket.key, exc)

    def _replacement_silence(self, alert: Alert, ticket_key: str, *, now: datetime) -> Silence:
        return Silence(
            created_by=SILENCE_CREATOR,
            comment=RECREATED_SILENCE_COMMENT,
            starts_at=now,
            ends_at=now + self.default_silence_duration,
            matchers=matchers_from_alert(alert),
            ticket_ref=ticket_key,
        )


__all__ = [
    "MATCHER_LABELS",
    "RefiredAlertDetector",
    "format_labels",
    "matchers_from_alert",
]
