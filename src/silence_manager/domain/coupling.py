"""Textual cross-references between silences and tickets.

A coupling is a single line ``"<prefix>: <reference>"`` at the very start of a
free-text field (a silence comment or a ticket description). Backends may put a
fixed lead in front of the marker (Alertmanager comments use ``"# "``); callers
strip that lead before extracting.

Extraction is a literal prefix compare from position zero. Text that does not
start with the exact marker has no reference, even if one appears further down.
Comment fields are edited by humans, so this stays a best-effort annotation and
not structured metadata.
"""

from __future__ import annotations


def marker(prefix: str) -> str:
    return f"{prefix}: "


def embed(
    text: str,
    prefix: str,
    reference: str,
    *,
    lead: str = "",
    separator: str = "\n",
) -> str:
    """Prepend a coupling line for ``reference`` to ``text``.

    An empty ``reference`` leaves ``text`` untouched.
    """

    if not reference:
        return text
    return f"{lead}{marker(prefix)}{reference}{separator}{text}"


def extract(text: str, prefix: str) -> str:
    """Return the reference embedded at the start of ``text`` or ``""``."""

    head = marker(prefix)
    if len(text) < len(head) or not text.startswith(head):
        return ""
    rest = text[len(head) :]
    reference, _newline, _tail = rest.partition("\n")
    return reference


def strip_lead(text: str, lead: str) -> str | None:
    """Remove a backend-specific lead, or return ``None`` when it is absent."""

    if not text.startswith(lead):
        return None
    return text[len(lead) :]


__all__ = ["embed", "extract", "marker", "strip_lead"]
