from __future__ import annotations

import asyncio
from typing import Any

import pytest
from conftest import ControlledTransport, ScriptedTransport, envelope, ok

from pyrestore._transport import TransportResponse
from pyrestore.exceptions import ClientRequestError, NetworkError, TransportConnectionError
from pyrestore.gateway import RequestGateway
from pyrestore.notify import NotificationCategory, RecordingNotifier
from pyrestore.resources import (
    MUTATION_RESOURCE_KEY,
    REMOVE_RESOURCE_KEY,
    MutationOptions,
    MutationResource,
    RemoveResource,
)
from pyrestore.state import Registry, inject


@pytest.mark.asyncio
async def test_send_posts_and_records_response(notifier: RecordingNotifier) -> None:
    transport = ScriptedTransport(ok(envelope({"queued": True})))
    gateway = RequestGateway(transport=transport, notifier=notifier)
    events: list[Any] = []
    mutation = MutationResource(
        gateway,
        MutationOptions(
            url=lambda params: f"/jobs/{params['id']}/run",
            request_config=lambda params: {"data": {"priority": params["priority"]}},
            pre_request=lambda: events.append("pre"),
            post_request=events.append,
        ),
    )

    result = await mutation.send({"id": 4, "priority": "high"})

    assert result == {"queued": True}
    assert events == ["pre", {"queued": True}]
    assert mutation.response.get() == {"queued": True}
    assert mutation.finished.get() is True
    assert mutation.loading.get() is False
    request = transport.requests[0]
    assert request.method == "POST"
    assert request.url.endswith("/jobs/4/run")
    assert request.data == {"priority": "high"}


@pytest.mark.asyncio
async def test_request_config_overrides_method(notifier: RecordingNotifier) -> None:
    transport = ScriptedTransport(ok(envelope(None)))
    gateway = RequestGateway(transport=transport, notifier=notifier)
    mutation = MutationResource(gateway, MutationOptions(url="/users/5", request_config={"method": "PATCH"}))

    await mutation.send()

    assert transport.requests[0].method == "PATCH"


@pytest.mark.asyncio
async def test_failure_is_recorded(notifier: RecordingNotifier) -> None:
    transport = ScriptedTransport(lambda _request: TransportConnectionError("reset by peer"))
    gateway = RequestGateway(transport=transport, notifier=notifier)
    posted: list[Any] = []
    mutation = MutationResource(gateway, MutationOptions(url="/jobs", post_request=posted.append))

    assert await mutation.send() is None

    assert isinstance(mutation.error.get(), NetworkError)
    assert mutation.finished.get() is False
    assert mutation.loading.get() is False
    assert posted == []
    assert notifier.messages == [(NotificationCategory.ERROR, "Network error")]


@pytest.mark.asyncio
async def test_new_send_clears_previous_error(notifier: RecordingNotifier) -> None:
    responses = iter(
        [
            TransportResponse(status=503, payload=None),
            TransportResponse(status=200, payload=envelope("done")),
        ]
    )
    gateway = RequestGateway(transport=ScriptedTransport(lambda _request: next(responses)), notifier=notifier)
    mutation = MutationResource(gateway, MutationOptions(url="/jobs"))

    await mutation.send()
    assert mutation.error.get() is not None

    assert await mutation.send() == "done"
    assert mutation.error.get() is None


@pytest.mark.asyncio
async def test_last_send_wins(gateway: RequestGateway, controlled: ControlledTransport) -> None:
    mutation = MutationResource(gateway, MutationOptions(url=lambda params: f"/jobs/{params}"))

    first = asyncio.create_task(mutation.send(1))
    await controlled.wait_for_calls(1)
    second = asyncio.create_task(mutation.send(2))
    await controlled.wait_for_calls(2)

    assert await first is None
    assert controlled.calls[0].aborted
    assert mutation.loading.get() is True

    controlled.calls[1].respond(envelope({"job": 2}))
    assert await second == {"job": 2}
    assert mutation.response.get() == {"job": 2}


@pytest.mark.asyncio
async def test_remove_uses_delete(notifier: RecordingNotifier) -> None:
    transport = ScriptedTransport(lambda _request: TransportResponse(status=204, payload=None))
    gateway = RequestGateway(transport=transport, notifier=notifier)
    remover = RemoveResource(gateway, MutationOptions(url=lambda row: f"/users/{row['id']}"))

    assert await remover.remove({"id": 5}) is None

    assert transport.requests[0].method == "DELETE"
    assert transport.requests[0].url.endswith("/users/5")
    assert remover.finished.get() is True
    assert remover.error.get() is None


def test_injection_keys(gateway: RequestGateway) -> None:
    registry = Registry()
    mutation = MutationResource(gateway, MutationOptions(url="/a", injection_key=True), registry=registry)
    remover = RemoveResource(gateway, MutationOptions(url="/b", injection_key=True), registry=registry)

    assert inject(registry, MUTATION_RESOURCE_KEY) is mutation
    assert inject(registry, REMOVE_RESOURCE_KEY) is remover


@pytest.mark.asyncio
async def test_snapshot(notifier: RecordingNotifier) -> None:
    gateway = RequestGateway(transport=ScriptedTransport(ok(envelope(1))), notifier=notifier)
    mutation = MutationResource(gateway, MutationOptions(url="/jobs"))
    await mutation.send()

    state = mutation.snapshot()
    assert state.finished is True
    assert state.response == 1


@pytest.mark.asyncio
async def test_failing_url_function_is_reported(notifier: RecordingNotifier) -> None:
    transport = ScriptedTransport(ok(envelope(None)))
    gateway = RequestGateway(transport=transport, notifier=notifier)
    mutation = MutationResource(gateway, MutationOptions(url=lambda params: f"/jobs/{params['id']}"))

    assert await mutation.send({}) is None

    assert isinstance(mutation.error.get(), ClientRequestError)
    assert transport.requests == []
    assert len(notifier.messages) == 1
    assert mutation.loading.get() is False
