from __future__ import annotations

import json
from collections.abc import Callable  # noqa: TC003
from datetime import UTC, datetime

import httpx
import pytest

from silence_manager.adapters.alertmanager import (
    AlertmanagerAPIError,
    AlertmanagerClient,
    SilenceNotFoundError,
    matcher_applies,
    parse_silence,
    parse_ticket_ref,
)
from silence_manager.adapters.alertmanager.translator import silence_to_payload
from silence_manager.adapters.http_resilience import ResilientClient
from silence_manager.config import AlertmanagerConfig, AuthType, ResilienceConfig
from silence_manager.domain.model import Matcher, Silence

BASE_URL = "http://alertmanager.test"


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            auth=resilience.auth,
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    config: AlertmanagerConfig | None = None,
) -> AlertmanagerClient:
    return AlertmanagerClient(
        config=config or AlertmanagerConfig(url=BASE_URL),
        client_factory=_make_client_factory(handler),
    )


def _silence_payload(
    silence_id: str,
    *,
    state: str = "active",
    comment: str = "# silence-manager: OPS-1\ndisk replacement",
) -> dict[str, object]:
    return {
        "id": silence_id,
        "status": {"state": state},
        "updatedAt": "2025-03-01T10:00:00.000Z",
        "comment": comment,
        "createdBy": "oncall",
        "startsAt": "2025-03-01T10:00:00.000Z",
        "endsAt": "2025-03-02T10:00:00.000Z",
        "matchers": [
            {"name": "alertname", "value": "DiskFull", "isRegex": False, "isEqual": True},
            {"name": "instance", "value": "db-.*", "isRegex": True},
        ],
    }


def test_list_active_keeps_active_and_pending() -> None:
    payload = [
        _silence_payload("s1"),
        _silence_payload("s2", state="pending", comment="no marker here"),
        _silence_payload("s3", state="expired"),
    ]
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=payload)

    silences = _client(handler).list_active()

    assert [silence.id for silence in silences] == ["s1", "s2"]
    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/v2/silences"

    first, second = silences
    assert first.ticket_ref == "OPS-1"
    assert first.comment == "disk replacement"
    assert first.ends_at == datetime(2025, 3, 2, 10, tzinfo=UTC)
    assert first.matchers == [
        Matcher(name="alertname", value="DiskFull"),
        Matcher(name="instance", value="db-.*", is_regex=True),
    ]
    assert second.ticket_ref == ""
    assert second.comment == "no marker here"


def test_get_unknown_silence_raises_not_found() -> None:
    client = _client(lambda _request: httpx.Response(404, text="silence not found"))

    with pytest.raises(SilenceNotFoundError):
        client.get("missing")


def test_unexpected_status_raises_api_error() -> None:
    client = _client(lambda _request: httpx.Response(500, text="internal"))

    with pytest.raises(AlertmanagerAPIError) as exc_info:
        client.list_active()

    assert exc_info.value.status_code == 500


def test_create_posts_silence_with_embedded_ticket_ref() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/v2/silences"
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"silenceID": "new-id"})

    silence = Silence(
        created_by="silence-manager",
        comment="Automatically recreated for refired alert",
        starts_at=datetime(2025, 3, 1, 12, tzinfo=UTC),
        ends_at=datetime(2025, 3, 8, 12, tzinfo=UTC),
        matchers=[Matcher(name="alertname", value="DiskFull")],
        ticket_ref="OPS-1",
    )

    silence_id = _client(handler).create(silence)

    assert silence_id == "new-id"
    (body,) = bodies
    assert "id" not in body
    assert "status" not in body
    assert body["comment"] == (
        "# silence-manager: OPS-1\nAutomatically recreated for refired alert"
    )
    assert body["createdBy"] == "silence-manager"
    assert body["matchers"] == [
        {"name": "alertname", "value": "DiskFull", "isRegex": False, "isEqual": True}
    ]


def test_set_end_time_reposts_silence_with_same_id() -> None:
    posted: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            assert request.url.path == "/api/v2/silence/s1"
            return httpx.Response(200, json=_silence_payload("s1"))
        posted.append(json.loads(request.content))
        return httpx.Response(200, json={"silenceID": "s1"})

    new_end = datetime(2025, 3, 9, 12, tzinfo=UTC)
    _client(handler).set_end_time("s1", new_end)

    (body,) = posted
    assert body["id"] == "s1"
    assert datetime.fromisoformat(str(body["endsAt"])) == new_end
    assert body["comment"] == "# silence-manager: OPS-1\ndisk replacement"


def test_delete_uses_silence_endpoint() -> None:
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(200)

    _client(handler).delete("s1")

    assert seen == [("DELETE", "/api/v2/silence/s1")]


def test_query_firing_filters_state_and_matchers() -> None:
    alerts = [
        {
            "labels": {"alertname": "DiskFull", "ticket": "OPS-1", "instance": "db-1"},
            "annotations": {"summary": "disk"},
            "startsAt": "2025-03-01T11:00:00Z",
            "endsAt": "2025-03-01T13:00:00Z",
            "status": {"state": "active", "silencedBy": [], "inhibitedBy": []},
        },
        {
            "labels": {"alertname": "DiskFull", "instance": "web-1"},
            "status": {"state": "active"},
        },
        {
            "labels": {"alertname": "DiskFull", "instance": "db-2"},
            "status": {"state": "suppressed", "silencedBy": ["s9"]},
        },
    ]
    client = _client(lambda _request: httpx.Response(200, json=alerts))

    everything = client.query_firing(None)
    db_only = client.query_firing([Matcher(name="instance", value="db-.*", is_regex=True)])

    assert len(everything) == 2
    assert [alert.labels["instance"] for alert in db_only] == ["db-1"]
    assert db_only[0].annotations == {"summary": "disk"}


def test_bearer_auth_header_is_sent() -> None:
    headers: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        headers.append(request.headers.get("Authorization"))
        return httpx.Response(200, json=[])

    config = AlertmanagerConfig(url=BASE_URL, auth_type=AuthType.BEARER, bearer_token="t0ken")
    _client(handler, config=config).list_active()

    assert headers == ["Bearer t0ken"]


def test_invalid_payload_raises_api_error() -> None:
    client = _client(lambda _request: httpx.Response(200, json={"not": "a list"}))

    with pytest.raises(AlertmanagerAPIError):
        client.list_active()


@pytest.mark.parametrize(
    ("comment", "expected"),
    [
        ("# silence-manager: OPS-1\nrest", "OPS-1"),
        ("# silence-manager: OPS-1", "OPS-1"),
        ("silence-manager: OPS-1", ""),
        ("#silence-manager: OPS-1", ""),
        ("note\n# silence-manager: OPS-1", ""),
    ],
)
def test_parse_ticket_ref(comment: str, expected: str) -> None:
    assert parse_ticket_ref(comment, "silence-manager") == expected


def test_silence_comment_round_trips_without_duplicating_marker() -> None:
    silence = parse_silence(_silence_payload("s1"), prefix="silence-manager")

    payload = silence_to_payload(silence, prefix="silence-manager")

    assert payload.comment == "# silence-manager: OPS-1\ndisk replacement"


@pytest.mark.parametrize(
    ("matcher", "labels", "expected"),
    [
        (Matcher(name="job", value="node"), {"job": "node"}, True),
        (Matcher(name="job", value="node"), {}, False),
        (Matcher(name="job", value="node", is_equal=False), {}, True),
        (Matcher(name="job", value="node", is_equal=False), {"job": "node"}, False),
        (Matcher(name="job", value="no.*", is_regex=True), {"job": "node"}, True),
        (Matcher(name="job", value="no", is_regex=True), {"job": "node"}, False),
        (Matcher(name="job", value="no.*", is_regex=True, is_equal=False), {"job": "db"}, True),
        (Matcher(name="job", value=".*", is_regex=True), {}, True),
    ],
)
def test_matcher_applies(matcher: Matcher, labels: dict[str, str], *, expected: bool) -> None:
    assert matcher_applies(matcher, labels) is expected
