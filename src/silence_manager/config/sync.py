"""Reconciliation defaults and environment overrides."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import get_env, get_env_bool, get_env_int
from .errors import ConfigurationError

DEFAULT_ANNOTATION_PREFIX = "silence-manager"
DEFAULT_EXPIRY_THRESHOLD_HOURS = 24
DEFAULT_EXTENSION_DURATION_HOURS = 7 * 24
DEFAULT_SILENCE_DURATION_HOURS = 7 * 24


@dataclass(frozen=True, slots=True)
class SyncConfig:
    expiry_threshold: timedelta = timedelta(hours=DEFAULT_EXPIRY_THRESHOLD_HOURS)
    extension_duration: timedelta = timedelta(hours=DEFAULT_EXTENSION_DURATION_HOURS)
    default_silence_duration: timedelta = timedelta(hours=DEFAULT_SILENCE_DURATION_HOURS)
    check_alerts: bool = True
    annotation_prefix: str = DEFAULT_ANNOTATION_PREFIX


def _hours(name: str, default: int) -> timedelta:
    hours = get_env_int(name, default)
    if hours <= 0:
        raise ConfigurationError(f"{name} must be a positive number of hours, got {hours}")
    return timedelta(hours=hours)


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        expiry_threshold=_hours("SYNC_EXPIRY_THRESHOLD_HOURS", DEFAULT_EXPIRY_THRESHOLD_HOURS),
        extension_duration=_hours(
            "SYNC_EXTENSION_DURATION_HOURS", DEFAULT_EXTENSION_DURATION_HOURS
        ),
        default_silence_duration=_hours(
            "SYNC_DEFAULT_SILENCE_DURATION_HOURS", DEFAULT_SILENCE_DURATION_HOURS
        ),
        check_alerts=get_env_bool("SYNC_CHECK_ALERTS", default=True),
        annotation_prefix=get_env("SYNC_ANNOTATION_PREFIX", DEFAULT_ANNOTATION_PREFIX),
    )
