"""Pydantic models describing the Alertmanager v2 API payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, Field


class AlertmanagerBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MatcherPayload(AlertmanagerBaseModel):
    name: str
    value: str
    is_regex: bool = Field(default=False, alias="isRegex")
    is_equal: bool = Field(default=True, alias="isEqual")


class SilenceStatusPayload(AlertmanagerBaseModel):
    state: str


class SilencePayload(AlertmanagerBaseModel):
    id: str | None = None
    status: SilenceStatusPayload | None = None
    comment: str = ""
    created_by: str = Field(default="", alias="createdBy")
    starts_at: datetime = Field(alias="startsAt")
    ends_at: datetime = Field(alias="endsAt")
    matchers: list[MatcherPayload] = Field(default_factory=list[MatcherPayload])

    def to_request_body(self) -> dict[str, object]:
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude={"status"},
            exclude_none=True,
        )


class CreateSilenceResponse(AlertmanagerBaseModel):
    silence_id: str = Field(alias="silenceID")


class AlertStatusPayload(AlertmanagerBaseModel):
    state: str
    silenced_by: list[str] = Field(default_factory=list[str], alias="silencedBy")
    inhibited_by: list[str] = Field(default_factory=list[str], alias="inhibitedBy")


class AlertPayload(AlertmanagerBaseModel):
    labels: dict[str, str] = Field(default_factory=dict[str, str])
    annotations: dict[str, str] = Field(default_factory=dict[str, str])
    starts_at: datetime | None = Field(default=None, alias="startsAt")
    ends_at: datetime | None = Field(default=None, alias="endsAt")
    status: AlertStatusPayload
    fingerprint: str | None = None
