from __future__ import annotations

import asyncio
from typing import Any

import pytest
from conftest import ControlledTransport, ScriptedTransport, envelope, ok

from pyrestore._transport import TransportResponse
from pyrestore.gateway import RequestGateway
from pyrestore.notify import RecordingNotifier
from pyrestore.resources import (
    EDIT_MODAL_RESOURCE_KEY,
    EditModalResource,
    EditResourceOptions,
    ModalResource,
)
from pyrestore.state import Registry, inject


def test_modal_open_and_close() -> None:
    modal = ModalResource(initial_params=lambda: {"team": 1})
    assert modal.visible.get() is False
    assert modal.initial_params.get() == {"team": 1}

    modal.open({"id": 3})
    assert modal.visible.get() is True
    assert modal.params.get() == {"id": 3}

    modal.close()
    assert modal.visible.get() is False


@pytest.mark.asyncio
async def test_begin_opens_and_submit_closes(notifier: RecordingNotifier) -> None:
    gateway = RequestGateway(transport=ScriptedTransport(ok(envelope({"id": 1}))), notifier=notifier)
    events: list[Any] = []
    resource = EditModalResource(
        gateway,
        EditResourceOptions(
            submit_url="/users",
            pre_action=lambda: events.append("pre"),
            post_submit=events.append,
        ),
    )

    await resource.begin_add()
    assert resource.visible.get() is True

    await resource.submit()

    assert resource.visible.get() is False
    assert events == ["pre", {"id": 1}]


@pytest.mark.asyncio
async def test_failed_submit_also_closes(notifier: RecordingNotifier) -> None:
    gateway = RequestGateway(
        transport=ScriptedTransport(lambda _request: TransportResponse(status=500, payload=None)),
        notifier=notifier,
    )
    resource = EditModalResource(gateway, EditResourceOptions(submit_url="/users"))
    await resource.begin_edit({"id": 1})

    await resource.submit()

    assert resource.visible.get() is False
    assert resource.error.get() is not None


@pytest.mark.asyncio
async def test_close_abandons_pending_submit(gateway: RequestGateway, controlled: ControlledTransport) -> None:
    resource = EditModalResource(gateway, EditResourceOptions(submit_url="/users"))
    await resource.begin_add()
    task = asyncio.create_task(resource.submit())
    await controlled.wait_for_calls(1)

    resource.close()

    assert await task is None
    assert controlled.calls[0].aborted
    assert resource.visible.get() is False
    assert resource.saving.get() is False


def test_edit_modal_injection_key(gateway: RequestGateway) -> None:
    registry = Registry()
    resource = EditModalResource(gateway, EditResourceOptions(injection_key=True), registry=registry)

    assert inject(registry, EDIT_MODAL_RESOURCE_KEY) is resource


@pytest.mark.asyncio
async def test_modal_initial_params_follow_form(notifier: RecordingNotifier) -> None:
    gateway = RequestGateway(transport=ScriptedTransport(ok(envelope(None))), notifier=notifier)
    resource = EditModalResource(gateway, EditResourceOptions(initial_params=lambda: {"team": 7}))

    await resource.begin_add()

    assert resource.modal.initial_params.get() == {"team": 7}
