"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass

from .alertmanager import AlertmanagerConfig, AuthType, get_alertmanager_config
from .env import get_env, get_env_bool, get_env_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .jira import JiraConfig, get_jira_config
from .logging import configure_logging
from .metrics import MetricsConfig, get_metrics_config
from .sync import SyncConfig, get_sync_config


@dataclass(frozen=True)
class AppConfig:
    alertmanager: AlertmanagerConfig
    jira: JiraConfig
    sync: SyncConfig
    metrics: MetricsConfig


def get_app_config() -> AppConfig:
    """Load and validate every configuration section from the environment."""

    return AppConfig(
        alertmanager=get_alertmanager_config(),
        jira=get_jira_config(),
        sync=get_sync_config(),
        metrics=get_metrics_config(),
    )


__all__ = [
    "AlertmanagerConfig",
    "AppConfig",
    "AuthType",
    "ConfigurationError",
    "JiraConfig",
    "MetricsConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "configure_logging",
    "get_alertmanager_config",
    "get_app_config",
    "get_env",
    "get_env_bool",
    "get_env_int",
    "get_jira_config",
    "get_metrics_config",
    "get_sync_config",
    "require_env_vars",
]
