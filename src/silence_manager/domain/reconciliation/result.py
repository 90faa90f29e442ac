"""Run-scoped outcome of one reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass, field


def describe_error(error: BaseException) -> str:
    """Render ``error`` and its explicit cause chain as one ``a: b: c`` line."""

    parts: list[str] = []
    current: BaseException | None = error
    while current is not None:
        parts.append(str(current) or type(current).__name__)
        current = current.__cause__
    return ": ".join(parts)


class ReconcileStepError(RuntimeError):
    """A primary mutation or lookup failed; chained to the backend error."""


def step_error(message: str, cause: BaseException) -> ReconcileStepError:
    error = ReconcileStepError(message)
    error.__cause__ = cause
    return error


@dataclass(frozen=True, slots=True)
class ReconcileError:
    """Non-fatal failure attributed to one silence, ticket or sub-step."""

    subject: str
    error: BaseException

    def __str__(self) -> str:
        return f"{self.subject}: {describe_error(self.error)}"


@dataclass(slots=True)
class ReconcileResult:
    silences_extended: int = 0
    silences_deleted: int = 0
    silences_created: int = 0
    tickets_reopened: int = 0
    errors: list[ReconcileError] = field(default_factory=list[ReconcileError])

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, subject: str, error: BaseException) -> ReconcileError:
        entry = ReconcileError(subject=subject, error=error)
        self.errors.append(entry)
        return entry

    def summary(self) -> str:
        return (
            f"extended={self.silences_extended}, deleted={self.silences_deleted}, "
            f"created={self.silences_created}, reopened={self.tickets_reopened}, "
            f"errors={len(self.errors)}"
        )


class ReconcileAbortedError(RuntimeError):
    """Raised when a run cannot start, e.g. the silence listing failed."""

    def __init__(self, message: str, *, result: ReconcileResult | None = None) -> None:
        super().__init__(message)
        self.result = result or ReconcileResult()


__all__ = [
    "ReconcileAbortedError",
    "ReconcileError",
    "ReconcileResult",
    "ReconcileStepError",
    "describe_error",
    "step_error",
]
