"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from silence_manager import __version__
from silence_manager.adapters.alertmanager import AlertmanagerClient
from silence_manager.adapters.jira import JiraClient
from silence_manager.adapters.pushgateway import PushgatewayPublisher
from silence_manager.config import get_app_config, get_env
from silence_manager.domain.clock import utcnow
from silence_manager.domain.ports.metrics import NoopMetricsPublisher
from silence_manager.domain.reconciliation import ReconcileSettings, ReconciliationEngine

if TYPE_CHECKING:
    from silence_manager.config import AppConfig, MetricsConfig, SyncConfig
    from silence_manager.domain.clock import Clock
    from silence_manager.domain.ports import MetricsPublisher, SilenceBackend, TicketSystem
    from silence_manager.domain.reconciliation import ReconcileResult

log = getLogger(__name__)

DEFAULT_BUILD_COMMIT = "none"
DEFAULT_BUILD_DATE = "unknown"


@dataclass(frozen=True, slots=True)
class BuildInfo:
    version: str = __version__
    commit: str = DEFAULT_BUILD_COMMIT
    build_date: str = DEFAULT_BUILD_DATE


def get_build_info() -> BuildInfo:
    """Read the commit and build date stamped into the environment at image build time."""

    return BuildInfo(
        commit=get_env("SILENCE_MANAGER_BUILD_COMMIT", DEFAULT_BUILD_COMMIT),
        build_date=get_env("SILENCE_MANAGER_BUILD_DATE", DEFAULT_BUILD_DATE),
    )


def build_silence_backend(config: AppConfig) -> SilenceBackend:
    log.info(
        "Alertmanager URL: %s (auth: %s)",
        config.alertmanager.url,
        config.alertmanager.auth_type,
    )
    return AlertmanagerClient(
        config=config.alertmanager,
        annotation_prefix=config.sync.annotation_prefix,
    )


def build_ticket_system(config: AppConfig) -> TicketSystem:
    log.info("Jira URL: %s (project: %s)", config.jira.url, config.jira.project_key)
    return JiraClient(config=config.jira, annotation_prefix=config.sync.annotation_prefix)


def build_metrics_publisher(
    config: MetricsConfig,
    *,
    build_info: BuildInfo | None = None,
    clock: Clock = utcnow,
) -> MetricsPublisher:
    if not config.enabled:
        log.info("Metrics publishing disabled")
        return NoopMetricsPublisher()

    log.info(f"Metrics publishing enabled: backend={config.backend}")
    publisher = PushgatewayPublisher.from_config(config, clock=clock)
    info = build_info or get_build_info()
    publisher.record_build_info(info.version, info.commit, info.build_date)
    return publisher


def reconcile_settings(sync: SyncConfig, *, check_alerts: bool | None = None) -> ReconcileSettings:
    return ReconcileSettings(
        expiry_threshold=sync.expiry_threshold,
        extension_duration=sync.extension_duration,
        default_silence_duration=sync.default_silence_duration,
        check_alerts=sync.check_alerts if check_alerts is None else check_alerts,
    )


def run_reconciliation(
    *,
    config: AppConfig | None = None,
    silences: SilenceBackend | None = None,
    tickets: TicketSystem | None = None,
    metrics: MetricsPublisher | None = None,
    check_alerts: bool | None = None,
    clock: Clock | None = None,
) -> ReconcileResult:
    """Run one reconciliation pass using the configured adapters.

    Any adapter passed explicitly replaces the one built from configuration.
    ``check_alerts`` overrides ``SYNC_CHECK_ALERTS`` when given.
    """

    effective_config = config or get_app_config()
    settings = reconcile_settings(effective_config.sync, check_alerts=check_alerts)
    log.info(
        "Sync configuration: prefix=%s, expiry_threshold=%s, extension=%s, "
        "default_silence=%s, check_alerts=%s",
        effective_config.sync.annotation_prefix,
        settings.expiry_threshold,
        settings.extension_duration,
        settings.default_silence_duration,
        settings.check_alerts,
    )

    publisher = metrics or build_metrics_publisher(
        effective_config.metrics, clock=clock or utcnow
    )
    engine = ReconciliationEngine(
        silences=silences or build_silence_backend(effective_config),
        tickets=tickets or build_ticket_system(effective_config),
        settings=settings,
        metrics=publisher,
    )
    if clock is not None:
        engine.clock = clock

    try:
        return engine.run()
    finally:
        try:
            publisher.close()
        except Exception as exc:  # noqa: BLE001
            log.warning(f"Failed to close metrics publisher: {exc}")
