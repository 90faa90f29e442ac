"""Jira configuration values."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

JIRA_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class JiraConfig:
    """Holds Jira Cloud API configuration values."""

    url: str
    username: str
    api_token: str
    project_key: str

    def resilience(self) -> ResilienceConfig:
        return ResilienceConfig(
            name="jira",
            base_url=self.url.rstrip("/"),
            timeout_seconds=JIRA_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            auth=httpx.BasicAuth(self.username, self.api_token),
            default_headers={"Accept": "application/json"},
        )


def get_jira_config() -> JiraConfig:
    values = require_env_vars(("JIRA_URL", "JIRA_USERNAME", "JIRA_API_TOKEN", "JIRA_PROJECT_KEY"))
    return JiraConfig(
        url=values["JIRA_URL"].strip(),
        username=values["JIRA_USERNAME"],
        api_token=values["JIRA_API_TOKEN"],
        project_key=values["JIRA_PROJECT_KEY"].strip(),
    )
