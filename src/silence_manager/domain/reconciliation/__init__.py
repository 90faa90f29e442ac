"""Reconciliation core keeping silences and tickets mutually consistent.

One pass:
1) list active silences (fatal on failure)
2) for each coupled silence, fetch its ticket and delete/extend/leave the silence
3) optionally reopen closed tickets whose alerts fire again
4) flush metrics
"""

from __future__ import annotations

from .engine import ReconciliationEngine
from .policy import ReconcileSettings, SilenceAction, decide_silence_action
from .refired import MATCHER_LABELS, RefiredAlertDetector, format_labels, matchers_from_alert
from .result import (
    ReconcileAbortedError,
    ReconcileError,
    ReconcileResult,
    ReconcileStepError,
    describe_error,
)

__all__ = [
    "MATCHER_LABELS",
    "ReconcileAbortedError",
    "ReconcileError",
    "ReconcileResult",
    "ReconcileSettings",
    "ReconcileStepError",
    "ReconciliationEngine",
    "RefiredAlertDetector",
    "SilenceAction",
    "decide_silence_action",
    "describe_error",
    "format_labels",
    "matchers_from_alert",
]
