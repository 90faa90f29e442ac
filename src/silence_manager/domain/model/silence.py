"""Silences, their label matchers and the alerts they suppress."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003

from .enums import AlertState


@dataclass(frozen=True, slots=True)
class Matcher:
    """Label condition selecting alerts; ``is_equal=False`` means ``!=``."""

    name: str
    value: str
    is_regex: bool = False
    is_equal: bool = True

    def __str__(self) -> str:
        operator = _OPERATORS[self.is_equal, self.is_regex]
        return f'{self.name}{operator}"{self.value}"'


_OPERATORS = {
    (True, False): "=",
    (False, False): "!=",
    (True, True): "=~",
    (False, True): "!~",
}


@dataclass(slots=True, kw_only=True)
class Silence:
    """Time-bounded suppression of alerts, optionally coupled to a ticket."""

    id: str = ""
    created_by: str = ""
    comment: str = ""
    starts_at: datetime
    ends_at: datetime
    matchers: list[Matcher] = field(default_factory=list[Matcher])
    ticket_ref: str = ""

    @property
    def is_coupled(self) -> bool:
        return bool(self.ticket_ref)


@dataclass(slots=True, kw_only=True)
class Alert:
    """Read-only snapshot of a firing alert."""

    labels: dict[str, str] = field(default_factory=dict[str, str])
    annotations: dict[str, str] = field(default_factory=dict[str, str])
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    status: AlertState = AlertState.ACTIVE
