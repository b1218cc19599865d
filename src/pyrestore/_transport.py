"""HTTP transport that turns a merged :class:`RequestConfig` into a response."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp

from pyrestore.exceptions import TransportConnectionError
from pyrestore.models.request import RequestConfig

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Raw HTTP response: status plus decoded body."""

    status: int
    payload: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by the gateway.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`AiohttpTransport`) concrete.

    Implementations return a :class:`TransportResponse` for every response
    the server sends, whatever its status, and raise
    :class:`TransportConnectionError` when no response arrived. They must
    tolerate task cancellation at any await point.
    """

    async def send(self, request: RequestConfig) -> TransportResponse:
        ...


def encode_query(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten query params into ``(key, value)`` string pairs.

    ``None`` values are dropped, booleans become ``true``/``false`` and
    lists/tuples repeat the key once per element.
    """
    if not params:
        return []
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if item is None:
                continue
            if isinstance(item, bool):
                pairs.append((key, "true" if item else "false"))
            else:
                pairs.append((key, str(item)))
    return pairs


def _decode_body(text: str) -> Any:
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


class AiohttpTransport:
    """Transport backed by an :class:`aiohttp.ClientSession`."""

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def send(self, request: RequestConfig) -> TransportResponse:
        timeout = aiohttp.ClientTimeout(total=request.timeout) if request.timeout else None
        kwargs: dict[str, Any] = {
            "params": encode_query(request.params),
            "headers": request.headers,
        }
        if request.data is not None:
            kwargs["json"] = request.data
        if timeout is not None:
            kwargs["timeout"] = timeout

        _logger.debug("%s %s", request.method, request.url)

        try:
            async with self._http.request(request.method, request.url, **kwargs) as resp:
                text = await resp.text()
                return TransportResponse(
                    status=resp.status,
                    payload=_decode_body(text),
                    headers=dict(resp.headers),
                )
        except (aiohttp.ClientConnectionError, aiohttp.ClientPayloadError, asyncio.TimeoutError) as exc:
            raise TransportConnectionError(f"{request.method} {request.url} failed: {exc}") from exc
