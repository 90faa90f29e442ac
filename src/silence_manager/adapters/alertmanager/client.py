"""HTTP client for the Alertmanager v2 API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import TypeAdapter, ValidationError

from silence_manager.adapters.http_resilience import ResilientClient, default_client_factory
from silence_manager.config.sync import DEFAULT_ANNOTATION_PREFIX
from silence_manager.domain.ports.silencing import SilenceBackend

from .schema import AlertPayload, CreateSilenceResponse, SilencePayload
from .translator import is_listed, matches_all, parse_alert, parse_silence, silence_to_payload

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from silence_manager.config.alertmanager import AlertmanagerConfig
    from silence_manager.config.http_resilience import ResilienceConfig
    from silence_manager.domain.model import Alert, Matcher, Silence

log = getLogger(__name__)

SILENCES_PATH = "/api/v2/silences"
SILENCE_PATH = "/api/v2/silence/{silence_id}"
ALERTS_PATH = "/api/v2/alerts"

_SILENCE_LIST = TypeAdapter(list[SilencePayload])
_ALERT_LIST = TypeAdapter(list[AlertPayload])


class AlertmanagerAPIError(RuntimeError):
    """Raised when Alertmanager answers with an unexpected status or payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SilenceNotFoundError(AlertmanagerAPIError):
    """Raised when a silence id is unknown to Alertmanager."""


class AlertmanagerClient:
    """Synchronous ``SilenceBackend`` on top of the async resilient HTTP client."""

    def __init__(
        self,
        *,
        config: AlertmanagerConfig,
        annotation_prefix: str = DEFAULT_ANNOTATION_PREFIX,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience()
        self._prefix = annotation_prefix or DEFAULT_ANNOTATION_PREFIX
        self._client_factory = client_factory or default_client_factory

    def list_active(self) -> list[Silence]:
        return asyncio.run(self._list_active_async())

    def get(self, silence_id: str) -> Silence:
        return asyncio.run(self._get_async(silence_id))

    def create(self, silence: Silence) -> str:
        return asyncio.run(self._post_silence_async(silence, with_id=False))

    def update(self, silence: Silence) -> None:
        asyncio.run(self._post_silence_async(silence, with_id=True))

    def set_end_time(self, silence_id: str, ends_at: datetime) -> None:
        asyncio.run(self._set_end_time_async(silence_id, ends_at))

    def delete(self, silence_id: str) -> None:
        asyncio.run(self._delete_async(silence_id))

    def query_firing(self, matchers: Sequence[Matcher] | None = None) -> list[Alert]:
        return asyncio.run(self._query_firing_async(matchers))

    async def _list_active_async(self) -> list[Silence]:
        async with self._client_factory(self._resilience) as client:
            response = await client.get(SILENCES_PATH)
        _expect_status(response, httpx.codes.OK, "list silences")

        try:
            payloads = _SILENCE_LIST.validate_python(response.json())
        except (ValidationError, ValueError) as exc:
            raise AlertmanagerAPIError("Unexpected Alertmanager silences payload") from exc

        silences = [
            parse_silence(item, prefix=self._prefix) for item in payloads if is_listed(item)
        ]
        log.debug(f"Listed {len(silences)} of {len(payloads)} silences as active or pending")
        return silences

    async def _get_async(self, silence_id: str) -> Silence:
        async with self._client_factory(self._resilience) as client:
            return await self._fetch_silence(client, silence_id)

    async def _fetch_silence(self, client: ResilientClient, silence_id: str) -> Silence:
        response = await client.get(SILENCE_PATH.format(silence_id=silence_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            raise SilenceNotFoundError(
                f"silence not found: {silence_id}", status_code=response.status_code
            )
        _expect_status(response, httpx.codes.OK, "get silence")

        try:
            payload = SilencePayload.model_validate(response.json())
        except (ValidationError, ValueError) as exc:
            raise AlertmanagerAPIError("Unexpected Alertmanager silence payload") from exc
        return parse_silence(payload, prefix=self._prefix)

    async def _post_silence_async(self, silence: Silence, *, with_id: bool) -> str:
        async with self._client_factory(self._resilience) as client:
            return await self._post_silence(client, silence, with_id=with_id)

    async def _post_silence(
        self,
        client: ResilientClient,
        silence: Silence,
        *,
        with_id: bool,
    ) -> str:
        payload = silence_to_payload(silence, prefix=self._prefix)
        if not with_id:
            payload.id = None
        elif not payload.id:
            raise AlertmanagerAPIError("Cannot update a silence without an id")

        action = "update silence" if with_id else "create silence"
        response = await client.post(SILENCES_PATH, json=payload.to_request_body())
        _expect_status(response, httpx.codes.OK, action)
        if with_id:
            return payload.id or ""

        try:
            created = CreateSilenceResponse.model_validate(response.json())
        except (ValidationError, ValueError) as exc:
            raise AlertmanagerAPIError("Unexpected Alertmanager create response") from exc
        return created.silence_id

    async def _set_end_time_async(self, silence_id: str, ends_at: datetime) -> None:
        async with self._client_factory(self._resilience) as client:
            silence = await self._fetch_silence(client, silence_id)
            silence.ends_at = ends_at
            await self._post_silence(client, silence, with_id=True)

    async def _delete_async(self, silence_id: str) -> None:
        async with self._client_factory(self._resilience) as client:
            response = await client.delete(SILENCE_PATH.format(silence_id=silence_id))
        _expect_status(response, httpx.codes.OK, "delete silence")

    async def _query_firing_async(self, matchers: Sequence[Matcher] | None) -> list[Alert]:
        async with self._client_factory(self._resilience) as client:
            response = await client.get(ALERTS_PATH)
        _expect_status(response, httpx.codes.OK, "get alerts")

        try:
            payloads = _ALERT_LIST.validate_python(response.json())
        except (ValidationError, ValueError) as exc:
            raise AlertmanagerAPIError("Unexpected Alertmanager alerts payload") from exc

        alerts = [parse_alert(item) for item in payloads if item.status.state == "active"]
        return [alert for alert in alerts if matches_all(alert, matchers)]


def _expect_status(response: httpx.Response, expected: int, action: str) -> None:
    if response.status_code == expected:
        return
    log.error(f"Alertmanager {action} failed with status {response.status_code}")
    raise AlertmanagerAPIError(
        f"failed to {action}: unexpected status code {response.status_code}: {response.text}",
        status_code=response.status_code,
    )


if TYPE_CHECKING:
    _backend_check: SilenceBackend = AlertmanagerClient(config=AlertmanagerConfig(url=""))
