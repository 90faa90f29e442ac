"""Pydantic models describing the Jira Cloud REST v3 payloads we use."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class JiraBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AdfText(JiraBaseModel):
    type: str = "text"
    text: str = ""


class AdfBlock(JiraBaseModel):
    type: str = "paragraph"
    content: list[AdfText] = Field(default_factory=list[AdfText])


class AdfDocument(JiraBaseModel):
    """Atlassian Document Format body, reduced to paragraphs of plain text."""

    type: Literal["doc"] = "doc"
    version: int = 1
    content: list[AdfBlock] = Field(default_factory=list[AdfBlock])


class StatusPayload(JiraBaseModel):
    name: str


class UserPayload(JiraBaseModel):
    account_id: str | None = Field(default=None, alias="accountId")
    name: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class ProjectRef(JiraBaseModel):
    key: str


class IssueTypeRef(JiraBaseModel):
    name: str


class IssueFields(JiraBaseModel):
    summary: str | None = None
    description: AdfDocument | None = None
    status: StatusPayload | None = None
    created: str | None = None
    updated: str | None = None
    labels: list[str] | None = None
    assignee: UserPayload | None = None
    project: ProjectRef | None = None
    issue_type: IssueTypeRef | None = Field(default=None, alias="issuetype")


class IssuePayload(JiraBaseModel):
    id: str | None = None
    key: str | None = None
    fields: IssueFields = Field(default_factory=IssueFields)

    def to_request_body(self) -> dict[str, object]:
        return self.model_dump(
            mode="json",
            by_alias=True,
            include={"fields"},
            exclude_none=True,
        )


class CreatedIssueResponse(JiraBaseModel):
    id: str | None = None
    key: str


class CommentRequest(JiraBaseModel):
    body: AdfDocument


class TransitionTarget(JiraBaseModel):
    name: str = ""


class TransitionPayload(JiraBaseModel):
    id: str
    name: str = ""
    to: TransitionTarget = Field(default_factory=TransitionTarget)


class TransitionsResponse(JiraBaseModel):
    transitions: list[TransitionPayload] = Field(default_factory=list[TransitionPayload])


class TransitionRef(JiraBaseModel):
    id: str


class TransitionRequest(JiraBaseModel):
    transition: TransitionRef
