from __future__ import annotations

from datetime import timedelta

import pytest

from silence_manager.adapters.pushgateway import PushgatewayPublisher
from silence_manager.app import (
    BuildInfo,
    build_metrics_publisher,
    get_build_info,
    run_reconciliation,
)
from silence_manager.config import (
    AlertmanagerConfig,
    AppConfig,
    JiraConfig,
    MetricsConfig,
    SyncConfig,
)
from silence_manager.domain.model import TicketStatus
from silence_manager.domain.ports.metrics import NoopMetricsPublisher
from silence_manager.domain.reconciliation import ReconcileAbortedError
from tests.helpers.fakes import (
    NOW,
    FakeSilenceBackend,
    FakeTicketSystem,
    RecordingMetricsPublisher,
    fixed_clock,
    make_alert,
    make_silence,
    make_ticket,
)


def _config(*, check_alerts: bool = True) -> AppConfig:
    return AppConfig(
        alertmanager=AlertmanagerConfig(url="http://alertmanager.test"),
        jira=JiraConfig(
            url="https://example.atlassian.net",
            username="bot@example.com",
            api_token="secret",
            project_key="OPS",
        ),
        sync=SyncConfig(check_alerts=check_alerts),
        metrics=MetricsConfig(),
    )


def test_run_reconciliation_with_injected_adapters(
    metrics: RecordingMetricsPublisher,
) -> None:
    silences = FakeSilenceBackend(
        [make_silence("s1", ticket_ref="OPS-1", ends_in=timedelta(hours=1))],
        alerts=[make_alert(alertname="Down", ticket="OPS-2")],
    )
    tickets = FakeTicketSystem(
        [make_ticket("OPS-1"), make_ticket("OPS-2", TicketStatus.CLOSED)]
    )

    result = run_reconciliation(
        config=_config(),
        silences=silences,
        tickets=tickets,
        metrics=metrics,
        clock=fixed_clock,
    )

    assert result.silences_extended == 1
    assert result.tickets_reopened == 1
    assert result.silences_created == 1
    assert metrics.flushes == 1
    assert metrics.closed


def test_check_alerts_override_wins_over_configuration(
    metrics: RecordingMetricsPublisher,
) -> None:
    silences = FakeSilenceBackend(alerts=[make_alert(alertname="Down", ticket="OPS-2")])
    tickets = FakeTicketSystem([make_ticket("OPS-2", TicketStatus.CLOSED)])

    result = run_reconciliation(
        config=_config(check_alerts=True),
        silences=silences,
        tickets=tickets,
        metrics=metrics,
        check_alerts=False,
        clock=fixed_clock,
    )

    assert result.tickets_reopened == 0
    assert tickets.get_calls == []


def test_publisher_is_closed_when_run_aborts(metrics: RecordingMetricsPublisher) -> None:
    silences = FakeSilenceBackend()
    silences.fail_on["list_active"] = ConnectionError("refused")

    with pytest.raises(ReconcileAbortedError):
        run_reconciliation(
            config=_config(),
            silences=silences,
            tickets=FakeTicketSystem(),
            metrics=metrics,
        )

    assert metrics.closed


def test_disabled_metrics_use_noop_publisher() -> None:
    assert isinstance(build_metrics_publisher(MetricsConfig()), NoopMetricsPublisher)


def test_enabled_metrics_record_build_info() -> None:
    publisher = build_metrics_publisher(
        MetricsConfig(enabled=True, backend="pushgateway", url="http://pushgateway.test:9091"),
        build_info=BuildInfo(version="1.0.0", commit="abc", build_date="2025-01-01"),
    )

    assert isinstance(publisher, PushgatewayPublisher)
    sample = publisher.registry.get_sample_value(
        "silence_manager_build_info",
        {"version": "1.0.0", "commit": "abc", "build_date": "2025-01-01"},
    )
    assert sample == 1.0


def test_publisher_measures_expiry_with_the_run_clock() -> None:
    publisher = build_metrics_publisher(
        MetricsConfig(enabled=True, backend="pushgateway", url="http://pushgateway.test:9091"),
        build_info=BuildInfo(),
        clock=fixed_clock,
    )

    publisher.record_expiry("s1", "OPS-1", NOW + timedelta(hours=1))

    assert isinstance(publisher, PushgatewayPublisher)
    sample = publisher.registry.get_sample_value(
        "silence_manager_silence_expiring_in", {"silence_id": "s1", "ticket": "OPS-1"}
    )
    assert sample == 3600.0


def test_build_info_read_from_environment(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SILENCE_MANAGER_BUILD_COMMIT", "4f2c9e1")
    clean_env.setenv("SILENCE_MANAGER_BUILD_DATE", "2025-02-28T08:00:00Z")

    info = get_build_info()

    assert info.commit == "4f2c9e1"
    assert info.build_date == "2025-02-28T08:00:00Z"


def test_build_info_defaults_when_unset(clean_env: pytest.MonkeyPatch) -> None:
    _ = clean_env

    info = get_build_info()

    assert (info.commit, info.build_date) == ("none", "unknown")
