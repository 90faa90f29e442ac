from __future__ import annotations

import pytest

from tests.helpers.fakes import FakeSilenceBackend, FakeTicketSystem, RecordingMetricsPublisher

_CONFIG_ENV_VARS = (
    "ALERTMANAGER_URL",
    "ALERTMANAGER_AUTH_TYPE",
    "ALERTMANAGER_USERNAME",
    "ALERTMANAGER_PASSWORD",
    "ALERTMANAGER_BEARER_TOKEN",
    "JIRA_URL",
    "JIRA_USERNAME",
    "JIRA_API_TOKEN",
    "JIRA_PROJECT_KEY",
    "SYNC_EXPIRY_THRESHOLD_HOURS",
    "SYNC_EXTENSION_DURATION_HOURS",
    "SYNC_DEFAULT_SILENCE_DURATION_HOURS",
    "SYNC_CHECK_ALERTS",
    "SYNC_ANNOTATION_PREFIX",
    "METRICS_ENABLED",
    "METRICS_BACKEND",
    "METRICS_URL",
    "METRICS_PUSHGATEWAY_JOB_NAME",
    "SILENCE_MANAGER_BUILD_COMMIT",
    "SILENCE_MANAGER_BUILD_DATE",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def silence_backend() -> FakeSilenceBackend:
    return FakeSilenceBackend()


@pytest.fixture
def ticket_system() -> FakeTicketSystem:
    return FakeTicketSystem()


@pytest.fixture
def metrics() -> RecordingMetricsPublisher:
    return RecordingMetricsPublisher()
