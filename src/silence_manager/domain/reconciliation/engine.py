"""Orchestrator for one silence/ticket reconciliation pass.

The engine composes the silencing, ticketing and metrics ports but does not
prescribe concrete adapters. Every run derives its decisions from data fetched
during that run; nothing is carried over between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from silence_manager.domain.clock import Clock, utcnow
from silence_manager.domain.ports.metrics import MetricsPublisher, NoopMetricsPublisher

from .policy import ReconcileSettings, SilenceAction, decide_silence_action
from .refired import RefiredAlertDetector
from .result import ReconcileAbortedError, ReconcileResult, step_error

if TYPE_CHECKING:
    from datetime import datetime

    from silence_manager.domain.model import Silence, Ticket
    from silence_manager.domain.ports import SilenceBackend, TicketSystem

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Keep coupled silences in line with the status of their tickets."""

    silences: SilenceBackend
    tickets: TicketSystem
    settings: ReconcileSettings = field(default_factory=ReconcileSettings)
    metrics: MetricsPublisher = field(default_factory=NoopMetricsPublisher)
    clock: Clock = field(default=utcnow)

    def run(self) -> ReconcileResult:
        """Run one full pass and return its aggregated result.

        Only a failure to enumerate silences is fatal and raises
        ``ReconcileAbortedError``. Per-silence and per-alert failures are collected
        in ``ReconcileResult.errors`` and the pass carries on.
        """

        result = ReconcileResult()
        log.info("Starting synchronization...")

        try:
            silences = self.silences.list_active()
        except Exception as exc:
            raise ReconcileAbortedError("failed to list silences", result=result) from exc

        log.info("Found %d active silences", len(silences))

        now = self.clock()
        for silence in silences:
            if not silence.is_coupled:
                log.debug("Silence %s has no ticket reference, skipping", silence.id)
                continue

            self._record_metrics(silence, now)

            try:
                self._process_silence(silence, result)
            except Exception as exc:  # noqa: BLE001
                error = result.add_error(silence.id, exc)
                log.error("Error processing silence %s", error)

        if self.settings.check_alerts:
            RefiredAlertDetector(
                silences=self.silences,
                tickets=self.tickets,
                default_silence_duration=self.settings.default_silence_duration,
                clock=self.clock,
            ).check(result)

        log.info("Synchronization complete: %s", result.summary())

        try:
            self.metrics.flush()
        except Exception as exc:  # noqa: BLE001
            error = result.add_error("push metrics", exc)
            log.warning("Failed to push metrics: %s", error)

        return result

    def _record_metrics(self, silence: Silence, now: datetime) -> None:
        try:
            self.metrics.record_check(silence.id, silence.ticket_ref, now)
            self.metrics.record_expiry(silence.id, silence.ticket_ref, silence.ends_at)
        except Exception as exc:  # noqa: BLE001
            log.warning("Failed to record metrics for silence %s: %s", silence.id, exc)

    def _process_silence(self, silence: Silence, result: ReconcileResult) -> None:
        try:
            ticket = self.tickets.get(silence.ticket_ref)
        except Exception as exc:
            raise step_error(f"failed to get ticket {silence.ticket_ref}", exc) from exc

        log.info(
            "Processing silence %s with ticket %s (status: %s)",
            silence.id,
            ticket.key,
            ticket.status,
        )

        until_expiry = silence.ends_at - self.clock()
        action = decide_silence_action(
            ticket_resolved=self.tickets.is_resolved(ticket),
            ticket_open=self.tickets.is_open(ticket),
            until_expiry=until_expiry,
            expiry_threshold=self.settings.expiry_threshold,
        )

        match action:
            case SilenceAction.DELETE:
                self._delete(silence, ticket)
                result.silences_deleted += 1
            case SilenceAction.EXTEND | SilenceAction.EXTEND_EXPIRED:
                self._extend(silence, ticket, action=action, until_expiry=until_expiry)
                result.silences_extended += 1
            case SilenceAction.NONE:
                log.debug("No action needed for silence %s", silence.id)

    def _delete(self, silence: Silence, ticket: Ticket) -> None:
        log.info("Ticket %s is resolved, deleting silence %s", ticket.key, silence.id)
        try:
            self.silences.delete(silence.id)
        except Exception as exc:
            raise step_error("failed to delete silence", exc) from exc
        self._comment(
            ticket.key,
            f"Silence {silence.id} has been automatically deleted because the ticket is resolved.",
        )

    def _extend(
        self,
        silence: Silence,
        ticket: Ticket,
        *,
        action: SilenceAction,
        until_expiry: timedelta,
    ) -> None:
        new_end = self.clock() + self.settings.extension_duration
        expired = action is SilenceAction.EXTEND_EXPIRED
        if expired:
            log.info(
                "Ticket %s is open and silence %s has expired, extending until %s",
                ticket.key,
                silence.id,
                _format_time(new_end),
            )
        else:
            log.info(
                "Ticket %s is open and silence %s expires in %s, extending until %s",
                ticket.key,
                silence.id,
                until_expiry,
                _format_time(new_end),
            )

        try:
            self.silences.set_end_time(silence.id, new_end)
        except Exception as exc:
            message = "failed to extend expired silence" if expired else "failed to extend silence"
            raise step_error(message, exc) from exc

        if expired:
            text = (
                f"Silence {silence.id} was expired and has been automatically "
                f"extended until {_format_time(new_end)}."
            )
        else:
            text = (
                f"Silence {silence.id} has been automatically extended "
                f"until {_format_time(new_end)}."
            )
        self._comment(ticket.key, text)

    def _comment(self, key: str, text: str) -> None:
        try:
            self.tickets.add_comment(key, text)
        except Exception as exc:  # noqa: BLE001
            log.warning("Failed to add comment to ticket %s: %s", key, exc)


def _format_time(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


__all__ = ["ReconciliationEngine"]
