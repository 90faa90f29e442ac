"""Translate Alertmanager payloads into domain silences and alerts."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from silence_manager.domain.coupling import embed, extract, strip_lead
from silence_manager.domain.model import Alert, AlertState, Matcher, Silence, SilenceState

from .schema import AlertPayload, MatcherPayload, SilencePayload

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

COMMENT_LEAD = "# "

LISTED_SILENCE_STATES = frozenset({SilenceState.ACTIVE, SilenceState.PENDING})


def parse_ticket_ref(comment: str, prefix: str) -> str:
    """Return the ticket key embedded as ``"# <prefix>: KEY"`` on the first comment line."""

    body = strip_lead(comment, COMMENT_LEAD)
    if body is None:
        return ""
    return extract(body, prefix)


def _strip_coupling_line(comment: str, ticket_ref: str) -> str:
    if not ticket_ref:
        return comment
    _line, _newline, rest = comment.partition("\n")
    return rest


def parse_silence(payload: SilencePayload | Mapping[str, object], *, prefix: str) -> Silence:
    model = (
        payload
        if isinstance(payload, SilencePayload)
        else SilencePayload.model_validate(payload)
    )
    ticket_ref = parse_ticket_ref(model.comment, prefix)
    return Silence(
        id=model.id or "",
        created_by=model.created_by,
        # The coupling line is re-added from ``ticket_ref`` on write.
        comment=_strip_coupling_line(model.comment, ticket_ref),
        starts_at=model.starts_at,
        ends_at=model.ends_at,
        matchers=[
            Matcher(
                name=matcher.name,
                value=matcher.value,
                is_regex=matcher.is_regex,
                is_equal=matcher.is_equal,
            )
            for matcher in model.matchers
        ],
        ticket_ref=ticket_ref,
    )


def silence_to_payload(silence: Silence, *, prefix: str) -> SilencePayload:
    return SilencePayload(
        id=silence.id or None,
        comment=embed(silence.comment, prefix, silence.ticket_ref, lead=COMMENT_LEAD),
        created_by=silence.created_by,
        starts_at=silence.starts_at,
        ends_at=silence.ends_at,
        matchers=[
            MatcherPayload(
                name=matcher.name,
                value=matcher.value,
                is_regex=matcher.is_regex,
                is_equal=matcher.is_equal,
            )
            for matcher in silence.matchers
        ],
    )


def is_listed(payload: SilencePayload) -> bool:
    if payload.status is None:
        return False
    return payload.status.state in LISTED_SILENCE_STATES


def parse_alert(payload: AlertPayload | Mapping[str, object]) -> Alert:
    model = payload if isinstance(payload, AlertPayload) else AlertPayload.model_validate(payload)
    try:
        status = AlertState(model.status.state)
    except ValueError:
        status = AlertState.UNPROCESSED
    return Alert(
        labels=dict(model.labels),
        annotations=dict(model.annotations),
        starts_at=model.starts_at,
        ends_at=model.ends_at,
        status=status,
    )


def matcher_applies(matcher: Matcher, labels: Mapping[str, str]) -> bool:
    """Evaluate one matcher against an alert's labels the way Alertmanager does.

    A missing label behaves as the empty string for regex matchers. Regexes are
    anchored on both ends.
    """

    if matcher.is_regex:
        matched = re.fullmatch(matcher.value, labels.get(matcher.name, "")) is not None
        return matched == matcher.is_equal

    present = matcher.name in labels
    if matcher.is_equal:
        return present and labels[matcher.name] == matcher.value
    return not present or labels[matcher.name] != matcher.value


def matches_all(alert: Alert, matchers: Sequence[Matcher] | None) -> bool:
    if not matchers:
        return True
    return all(matcher_applies(matcher, alert.labels) for matcher in matchers)


__all__ = [
    "COMMENT_LEAD",
    "is_listed",
    "matcher_applies",
    "matches_all",
    "parse_alert",
    "parse_silence",
    "parse_ticket_ref",
    "silence_to_payload",
]
