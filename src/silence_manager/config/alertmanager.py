"""Alertmanager configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import httpx

from .env import get_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Generator

ALERTMANAGER_TIMEOUT_SECONDS = 30.0


class AuthType(StrEnum):
    NONE = "none"
    BASIC = "basic"
    BEARER = "bearer"


class BearerAuth(httpx.Auth):
    """Attach a static bearer token to every request."""

    def __init__(self, token: str) -> None:
        self._header = f"Bearer {token}"

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = self._header
        yield request


@dataclass(frozen=True)
class AlertmanagerConfig:
    """Holds Alertmanager API configuration values."""

    url: str
    auth_type: AuthType = AuthType.NONE
    username: str = ""
    password: str = ""
    bearer_token: str = ""

    def __post_init__(self) -> None:
        if self.auth_type is AuthType.BASIC and not (self.username and self.password):
            raise MissingConfigurationError(
                "ALERTMANAGER_USERNAME and ALERTMANAGER_PASSWORD are required "
                "when ALERTMANAGER_AUTH_TYPE is 'basic'"
            )
        if self.auth_type is AuthType.BEARER and not self.bearer_token:
            raise MissingConfigurationError(
                "ALERTMANAGER_BEARER_TOKEN is required when ALERTMANAGER_AUTH_TYPE is 'bearer'"
            )

    def build_auth(self) -> httpx.Auth | None:
        if self.auth_type is AuthType.BASIC:
            return httpx.BasicAuth(self.username, self.password)
        if self.auth_type is AuthType.BEARER:
            return BearerAuth(self.bearer_token)
        return None

    def resilience(self) -> ResilienceConfig:
        return ResilienceConfig(
            name="alertmanager",
            base_url=self.url.rstrip("/"),
            timeout_seconds=ALERTMANAGER_TIMEOUT_SECONDS,
            auth=self.build_auth(),
        )


def _parse_auth_type(raw: str) -> AuthType:
    try:
        return AuthType(raw.lower())
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid ALERTMANAGER_AUTH_TYPE: {raw} (must be 'none', 'basic', or 'bearer')"
        ) from exc


def get_alertmanager_config() -> AlertmanagerConfig:
    values = require_env_vars(("ALERTMANAGER_URL",))
    return AlertmanagerConfig(
        url=values["ALERTMANAGER_URL"].strip(),
        auth_type=_parse_auth_type(get_env("ALERTMANAGER_AUTH_TYPE", AuthType.NONE.value)),
        username=get_env("ALERTMANAGER_USERNAME"),
        password=get_env("ALERTMANAGER_PASSWORD"),
        bearer_token=get_env("ALERTMANAGER_BEARER_TOKEN"),
    )
