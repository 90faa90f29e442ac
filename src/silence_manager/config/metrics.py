"""Metrics publishing configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .env import get_env, get_env_bool
from .errors import ConfigurationError, MissingConfigurationError

SUPPORTED_METRICS_BACKENDS = frozenset({"pushgateway"})
DEFAULT_PUSHGATEWAY_JOB_NAME = "silence_manager"
PUSHGATEWAY_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class MetricsConfig:
    enabled: bool = False
    backend: str = ""
    url: str = ""
    job_name: str = DEFAULT_PUSHGATEWAY_JOB_NAME
    timeout_seconds: float = PUSHGATEWAY_TIMEOUT_SECONDS


def get_metrics_config() -> MetricsConfig:
    config = MetricsConfig(
        enabled=get_env_bool("METRICS_ENABLED", default=False),
        backend=get_env("METRICS_BACKEND").lower(),
        url=get_env("METRICS_URL"),
        job_name=get_env("METRICS_PUSHGATEWAY_JOB_NAME", DEFAULT_PUSHGATEWAY_JOB_NAME),
    )
    if not config.enabled:
        return config

    if not config.backend:
        raise MissingConfigurationError(
            "METRICS_BACKEND is required when METRICS_ENABLED is true (must be 'pushgateway')"
        )
    if config.backend not in SUPPORTED_METRICS_BACKENDS:
        raise ConfigurationError(
            f"Invalid METRICS_BACKEND: {config.backend} (must be 'pushgateway')"
        )
    if not config.url:
        raise MissingConfigurationError("METRICS_URL is required when metrics are enabled")
    return config
