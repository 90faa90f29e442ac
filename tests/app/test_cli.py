from __future__ import annotations

import logging

import pytest

from silence_manager.config import MissingConfigurationError
from silence_manager.domain.reconciliation import ReconcileAbortedError, ReconcileResult
from silence_manager.ui import cli


def _patch_run(
    monkeypatch: pytest.MonkeyPatch,
    *,
    result: ReconcileResult | None = None,
    error: Exception | None = None,
) -> dict[str, object]:
    captured: dict[str, object] = {}

    def fake_run(**kwargs: object) -> ReconcileResult:
        captured.update(kwargs)
        if error is not None:
            raise error
        return result or ReconcileResult()

    monkeypatch.setattr(cli, "run_reconciliation", fake_run)
    return captured


def test_cli_defaults_defer_to_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _patch_run(monkeypatch)

    cli.main([])

    assert captured == {"check_alerts": None}


def test_cli_no_check_alerts_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = _patch_run(monkeypatch)

    cli.main(["--no-check-alerts", "--log-level", "debug"])

    assert captured["check_alerts"] is False


def test_cli_reports_counts(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    _patch_run(monkeypatch, result=ReconcileResult(silences_extended=2, tickets_reopened=1))

    with caplog.at_level(logging.INFO, logger="silence_manager.ui.cli"):
        cli.main([])

    assert "Silences extended: 2" in caplog.text
    assert "Tickets reopened: 1" in caplog.text
    assert "Synchronization completed successfully" in caplog.text


def test_cli_exits_one_when_errors_were_collected(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    result = ReconcileResult(silences_deleted=1)
    result.add_error("s1", RuntimeError("failed to extend silence"))
    _patch_run(monkeypatch, result=result)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 1
    assert "1. s1: failed to extend silence" in caplog.text


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (MissingConfigurationError("Missing configuration for: JIRA_URL"), 2),
        (ReconcileAbortedError("failed to list silences"), 1),
        (RuntimeError("unexpected"), 1),
    ],
)
def test_cli_exit_codes_for_fatal_errors(
    monkeypatch: pytest.MonkeyPatch, error: Exception, code: int
) -> None:
    _patch_run(monkeypatch, error=error)

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == code


def test_cli_rejects_unknown_log_level() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--log-level", "verbose"])

    assert excinfo.value.code == 2
