"""Prometheus Pushgateway implementation of the metrics port."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

from silence_manager.domain.clock import Clock, utcnow
from silence_manager.domain.ports.metrics import MetricsPublisher

if TYPE_CHECKING:
    from datetime import datetime

    from silence_manager.config.metrics import MetricsConfig

log = getLogger(__name__)


class MetricsPushError(RuntimeError):
    """Raised when the Pushgateway rejects or cannot receive a push."""


@dataclass(slots=True)
class PushgatewayPublisher:
    """Collect gauges in a private registry and push them on ``flush``.

    A push replaces every series of the job, so series for silences that
    disappeared since the last run are dropped by the gateway.
    """

    url: str
    job_name: str = "silence_manager"
    timeout_seconds: float = 10.0
    clock: Clock = field(default=utcnow)
    registry: CollectorRegistry = field(default_factory=CollectorRegistry)
    _build_info: Gauge = field(init=False)
    _last_checked: Gauge = field(init=False)
    _expiring_in: Gauge = field(init=False)

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("Pushgateway URL is required")
        self._build_info = Gauge(
            "silence_manager_build_info",
            "Build information for silence-manager including version, commit, and build date",
            ["version", "commit", "build_date"],
            registry=self.registry,
        )
        self._last_checked = Gauge(
            "silence_manager_silence_last_checked",
            "Unix timestamp of when a silence was last checked",
            ["silence_id", "ticket"],
            registry=self.registry,
        )
        self._expiring_in = Gauge(
            "silence_manager_silence_expiring_in",
            "Seconds until a silence expires",
            ["silence_id", "ticket"],
            registry=self.registry,
        )
        log.info(f"Initialized Pushgateway metrics publisher: url={self.url}, job={self.job_name}")

    @classmethod
    def from_config(cls, config: MetricsConfig, *, clock: Clock = utcnow) -> PushgatewayPublisher:
        return cls(
            url=config.url,
            job_name=config.job_name,
            timeout_seconds=config.timeout_seconds,
            clock=clock,
        )

    def record_build_info(self, version: str, commit: str, build_date: str) -> None:
        self._build_info.labels(version, commit, build_date).set(1)

    def record_check(self, silence_id: str, ticket_key: str, at: datetime) -> None:
        self._last_checked.labels(silence_id, ticket_key).set(int(at.timestamp()))

    def record_expiry(self, silence_id: str, ticket_key: str, expires_at: datetime) -> None:
        seconds = (expires_at - self.clock()).total_seconds()
        self._expiring_in.labels(silence_id, ticket_key).set(max(seconds, 0.0))

    def flush(self) -> None:
        log.info(f"Pushing metrics to Pushgateway: {self.url}")
        try:
            push_to_gateway(
                self.url,
                job=self.job_name,
                registry=self.registry,
                timeout=self.timeout_seconds,
            )
        except OSError as exc:
            raise MetricsPushError(f"failed to push metrics to pushgateway: {exc}") from exc
        log.info("Successfully pushed metrics to Pushgateway")

    def close(self) -> None:
        return None


if TYPE_CHECKING:
    _publisher_check: MetricsPublisher = PushgatewayPublisher(url="http://localhost:9091")
