from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest

from pyrestore._transport import TransportResponse
from pyrestore.config import GatewayConfig
from pyrestore.gateway import RequestGateway
from pyrestore.models.request import RequestConfig
from pyrestore.notify import RecordingNotifier


def envelope(data: Any, *, code: int = 0, message: str = "") -> dict[str, Any]:
    return {"code": code, "message": message, "data": data}


def page(items: list[Any], *, page: int = 0, size: int = 20, total: int | None = None) -> dict[str, Any]:
    return {"items": items, "page": page, "size": size, "total": len(items) if total is None else total}


@dataclass
class PendingCall:
    request: RequestConfig
    future: asyncio.Future[TransportResponse]

    @property
    def aborted(self) -> bool:
        return self.future.cancelled()

    def respond(self, payload: Any, *, status: int = 200) -> None:
        if not self.future.done():
            self.future.set_result(TransportResponse(status=status, payload=payload))

    def fail(self, exc: BaseException) -> None:
        if not self.future.done():
            self.future.set_exception(exc)


class ControlledTransport:
    """Transport whose calls stay pending until the test answers them."""

    def __init__(self) -> None:
        self.calls: list[PendingCall] = []

    async def send(self, request: RequestConfig) -> TransportResponse:
        call = PendingCall(request, asyncio.get_running_loop().create_future())
        self.calls.append(call)
        return await call.future

    async def wait_for_calls(self, count: int) -> None:
        for _ in range(100):
            if len(self.calls) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} transport calls, got {len(self.calls)}")


class ScriptedTransport:
    """Transport that answers immediately through a responder function."""

    def __init__(self, responder: Callable[[RequestConfig], TransportResponse | BaseException]) -> None:
        self._responder = responder
        self.requests: list[RequestConfig] = []

    async def send(self, request: RequestConfig) -> TransportResponse:
        self.requests.append(request)
        result = self._responder(request)
        if isinstance(result, BaseException):
            raise result
        return result


def ok(payload: Any, status: int = 200) -> Callable[[RequestConfig], TransportResponse]:
    return lambda _request: TransportResponse(status=status, payload=payload)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def controlled() -> ControlledTransport:
    return ControlledTransport()


@pytest.fixture
def gateway(controlled: ControlledTransport, notifier: RecordingNotifier) -> RequestGateway:
    return RequestGateway(
        GatewayConfig(base_url="https://api.example.test/api"),
        transport=controlled,
        notifier=notifier,
    )
