"""One-shot requests: generic mutations and removals."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from typing import Any

from pyrestore._token import RequestToken
from pyrestore.gateway import RequestGateway
from pyrestore.models.request import config_fields
from pyrestore.models.state import MutationResourceState
from pyrestore.resources._base import (
    InjectionOption,
    RequestTracker,
    publish_if_requested,
    resolve_injection_key,
)
from pyrestore.state.cell import Cell
from pyrestore.state.registry import InjectionKey, Registry
from pyrestore.utils import resolve_value

_logger = logging.getLogger(__name__)

MUTATION_RESOURCE_KEY = InjectionKey("MutationResource")
REMOVE_RESOURCE_KEY = InjectionKey("RemoveResource")


@dataclasses.dataclass(frozen=True)
class MutationOptions:
    """Configuration of a :class:`MutationResource`.

    ``url`` and ``request_config`` are literals or ``fn(params)``, where
    ``params`` is the argument given to :meth:`MutationResource.send`.
    ``request_config`` fields win over the resource defaults, so
    ``{"method": "PATCH", "data": {...}}`` changes both method and body.
    """

    url: str | Callable[..., str]
    request_config: Any = None
    pre_request: Callable[[], None] | None = None
    post_request: Callable[[Any], None] | None = None
    injection_key: InjectionOption = None


class MutationResource:
    """Cancellation-safe wrapper around a single request."""

    default_method = "POST"

    def __init__(
        self,
        gateway: RequestGateway,
        options: MutationOptions,
        *,
        registry: Registry | None = None,
    ) -> None:
        self._gateway = gateway
        self._options = options
        self._requests = RequestTracker("mutation", gateway.request_error_handler)

        self.loading: Cell[bool] = Cell(False, name="loading")
        self.finished: Cell[bool] = Cell(False, name="finished")
        self.error: Cell[Exception | None] = Cell(None, name="error")
        self.response: Cell[Any] = Cell(None, name="response")

        self.injection_key = resolve_injection_key(options.injection_key, self._default_injection_key())
        publish_if_requested(self, registry, options.injection_key)

    def _default_injection_key(self) -> InjectionKey:
        return MUTATION_RESOURCE_KEY

    @property
    def token(self) -> RequestToken | None:
        return self._requests.token

    async def send(self, params: Any = None) -> Any:
        """Send the request for *params*; supersedes a pending send.

        Returns the unwrapped response, or ``None`` on failure or when
        superseded.
        """
        if self._options.pre_request is not None:
            self._options.pre_request()
        self.error.set(None)
        self.finished.set(False)
        self.loading.set(True)

        outcome = await self._requests.run(
            lambda token: self._send(token, params),
            on_abandon=lambda: self.loading.set(False),
        )
        if outcome is None:
            return None

        self.loading.set(False)
        if outcome.error is not None:
            self.error.set(outcome.error)
            return None

        self.response.set(outcome.value)
        self.finished.set(True)
        if self._options.post_request is not None:
            self._options.post_request(outcome.value)
        return outcome.value

    def dispose(self) -> None:
        self._requests.cancel()

    def snapshot(self) -> MutationResourceState:
        return MutationResourceState(
            loading=self.loading.get(),
            finished=self.finished.get(),
            error=self.error.get(),
            response=self.response.get(),
        )

    async def _send(self, token: RequestToken, params: Any) -> Any:
        config = {
            "method": self.default_method,
            "url": resolve_value(self._options.url, params),
            **config_fields(resolve_value(self._options.request_config, params)),
        }
        _logger.debug("%s %s", config["method"], config["url"])
        return await self._gateway.request(config, token=token)


class RemoveResource(MutationResource):
    """Mutation that defaults to ``DELETE``.

    Usage::

        remover = RemoveResource(gateway, MutationOptions(url=lambda row: f"/users/{row['id']}"))
        await remover.remove({"id": 5})
    """

    default_method = "DELETE"

    def _default_injection_key(self) -> InjectionKey:
        return REMOVE_RESOURCE_KEY

    async def remove(self, params: Any = None) -> Any:
        return await self.send(params)
