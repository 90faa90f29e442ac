"""HTTP client for the Jira Cloud REST v3 API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from silence_manager.adapters.http_resilience import ResilientClient, default_client_factory
from silence_manager.config.sync import DEFAULT_ANNOTATION_PREFIX
from silence_manager.domain.ports.ticketing import TicketSystem

from .schema import (
    CommentRequest,
    CreatedIssueResponse,
    IssuePayload,
    IssueTypeRef,
    ProjectRef,
    TransitionRef,
    TransitionRequest,
    TransitionsResponse,
)
from .translator import (
    build_document,
    parse_ticket,
    select_close_transition,
    select_reopen_transition,
    ticket_to_payload,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from silence_manager.config.http_resilience import ResilienceConfig
    from silence_manager.config.jira import JiraConfig
    from silence_manager.domain.model import Ticket

    from .schema import TransitionPayload

log = getLogger(__name__)

ISSUES_PATH = "/rest/api/3/issue"
ISSUE_PATH = "/rest/api/3/issue/{key}"
COMMENT_PATH = "/rest/api/3/issue/{key}/comment"
TRANSITIONS_PATH = "/rest/api/3/issue/{key}/transitions"

DEFAULT_ISSUE_TYPE = "Task"


class JiraAPIError(RuntimeError):
    """Raised when Jira answers with an unexpected status or payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TicketNotFoundError(JiraAPIError):
    """Raised when an issue key does not exist or is not visible to the user."""


class JiraClient:
    """Synchronous ``TicketSystem`` on top of the async resilient HTTP client."""

    def __init__(
        self,
        *,
        config: JiraConfig,
        annotation_prefix: str = DEFAULT_ANNOTATION_PREFIX,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience()
        self._prefix = annotation_prefix or DEFAULT_ANNOTATION_PREFIX
        self._client_factory = client_factory or default_client_factory

    def get(self, key: str) -> Ticket:
        return asyncio.run(self._get_async(key))

    def create(self, ticket: Ticket) -> str:
        return asyncio.run(self._create_async(ticket))

    def update(self, ticket: Ticket) -> None:
        asyncio.run(self._update_async(ticket))

    def add_comment(self, key: str, text: str) -> None:
        asyncio.run(self._add_comment_async(key, text))

    def reopen(self, key: str, text: str) -> None:
        asyncio.run(self._transition_async(key, text, reopen=True))

    def close(self, key: str, text: str) -> None:
        asyncio.run(self._transition_async(key, text, reopen=False))

    def is_resolved(self, ticket: Ticket) -> bool:
        return ticket.is_resolved

    def is_closed(self, ticket: Ticket) -> bool:
        return ticket.is_closed

    def is_open(self, ticket: Ticket) -> bool:
        return ticket.is_open

    async def _get_async(self, key: str) -> Ticket:
        async with self._client_factory(self._resilience) as client:
            response = await client.get(ISSUE_PATH.format(key=key))
        if response.status_code == httpx.codes.NOT_FOUND:
            raise TicketNotFoundError(f"ticket not found: {key}", status_code=response.status_code)
        _expect_status(response, httpx.codes.OK, "get ticket")

        try:
            payload = IssuePayload.model_validate(response.json())
        except (ValidationError, ValueError) as exc:
            raise JiraAPIError("Unexpected Jira issue payload") from exc
        return parse_ticket(payload, prefix=self._prefix)

    async def _create_async(self, ticket: Ticket) -> str:
        payload = ticket_to_payload(ticket, prefix=self._prefix)
        payload.fields.project = ProjectRef(key=self._config.project_key)
        payload.fields.issue_type = IssueTypeRef(name=DEFAULT_ISSUE_TYPE)

        async with self._client_factory(self._resilience) as client:
            response = await client.post(ISSUES_PATH, json=payload.to_request_body())
        _expect_status(response, httpx.codes.CREATED, "create ticket")

        try:
            created = CreatedIssueResponse.model_validate(response.json())
        except (ValidationError, ValueError) as exc:
            raise JiraAPIError("Unexpected Jira create response") from exc
        log.info(f"Created Jira ticket {created.key}")
        return created.key

    async def _update_async(self, ticket: Ticket) -> None:
        payload = ticket_to_payload(ticket, prefix=self._prefix)
        async with self._client_factory(self._resilience) as client:
            response = await client.put(
                ISSUE_PATH.format(key=ticket.key), json=payload.to_request_body()
            )
        _expect_status(response, httpx.codes.NO_CONTENT, "update ticket")

    async def _add_comment_async(self, key: str, text: str) -> None:
        async with self._client_factory(self._resilience) as client:
            await self._add_comment(client, key, text)

    async def _add_comment(self, client: ResilientClient, key: str, text: str) -> None:
        body = CommentRequest(body=build_document(text))
        response = await client.post(
            COMMENT_PATH.format(key=key),
            json=body.model_dump(mode="json", by_alias=True),
        )
        _expect_status(response, httpx.codes.CREATED, "add comment")

    async def _transition_async(self, key: str, text: str, *, reopen: bool) -> None:
        async with self._client_factory(self._resilience) as client:
            if text:
                await self._add_comment(client, key, text)

            transitions = await self._get_transitions(client, key)
            if reopen:
                transition = select_reopen_transition(transitions)
            else:
                transition = select_close_transition(transitions)
            if transition is None:
                kind = "reopen" if reopen else "close"
                raise JiraAPIError(f"no {kind} transition found for ticket {key}")

            log.debug(f"Applying transition {transition.name!r} ({transition.id}) to {key}")
            request = TransitionRequest(transition=TransitionRef(id=transition.id))
            response = await client.post(
                TRANSITIONS_PATH.format(key=key),
                json=request.model_dump(mode="json", by_alias=True),
            )
        _expect_status(response, httpx.codes.NO_CONTENT, "transition ticket")

    async def _get_transitions(self, client: ResilientClient, key: str) -> list[TransitionPayload]:
        response = await client.get(TRANSITIONS_PATH.format(key=key))
        _expect_status(response, httpx.codes.OK, "get transitions")
        try:
            return TransitionsResponse.model_validate(response.json()).transitions
        except (ValidationError, ValueError) as exc:
            raise JiraAPIError("Unexpected Jira transitions payload") from exc


def _expect_status(response: httpx.Response, expected: int, action: str) -> None:
    if response.status_code == expected:
        return
    log.error(f"Jira {action} failed with status {response.status_code}")
    raise JiraAPIError(
        f"failed to {action}: unexpected status code {response.status_code}: {response.text}",
        status_code=response.status_code,
    )


if TYPE_CHECKING:
    _ticketing_check: TicketSystem = JiraClient(
        config=JiraConfig(url="", username="", api_token="", project_key="")
    )
