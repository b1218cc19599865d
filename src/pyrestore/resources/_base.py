"""Shared machinery for resources: tracked calls and injection keys.

Every resource operation that talks to the server runs through a
:class:`RequestTracker`. The tracker mints a token (aborting the previous
one), runs the operation, and reports an :class:`Outcome` only if the
operation is still the authoritative one when it settles. A ``None``
result means "superseded": the caller must not touch its state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pyrestore._token import RequestToken, TokenSlot
from pyrestore.exceptions import ClientRequestError, RequestCancelledError, RequestError
from pyrestore.state.registry import InjectionKey, Key, Registry, with_injection

_logger = logging.getLogger(__name__)

T = TypeVar("T")

InjectionOption = bool | Key | None


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """Settlement of a call that was still current when it finished."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RequestTracker:
    """Token slot plus the settle-only-if-current protocol.

    *report* receives errors raised outside the gateway (caller hooks,
    page validation) once they are wrapped in :class:`ClientRequestError`.
    Gateway errors are reported by the gateway itself.
    """

    def __init__(self, name: str, report: Callable[[RequestError], None] | None = None) -> None:
        self._name = name
        self._tokens = TokenSlot(name)
        self._report = report

    @property
    def token(self) -> RequestToken | None:
        return self._tokens.current

    def is_current(self, token: RequestToken) -> bool:
        return self._tokens.is_current(token)

    def cancel(self) -> None:
        """Abort the in-flight call, if any; its settlement is discarded."""
        self._tokens.clear()

    async def run(
        self,
        operation: Callable[[RequestToken], Awaitable[T]],
        *,
        on_abandon: Callable[[], None] | None = None,
    ) -> Outcome[T] | None:
        """Run *operation* under a fresh token.

        Returns ``None`` when a newer call superseded this one (including
        when it was aborted mid-flight), otherwise the value or the error.

        If the calling task itself is cancelled while this call is current,
        the token is released, *on_abandon* runs and the cancellation
        propagates.
        """
        token = self._tokens.issue()
        try:
            value = await operation(token)
        except RequestCancelledError:
            _logger.debug("%s call %r cancelled", self._name, token)
            return None
        except asyncio.CancelledError:
            if self._tokens.is_current(token):
                _logger.debug("%s call %r abandoned by its caller", self._name, token)
                self._tokens.clear()
                if on_abandon is not None:
                    on_abandon()
            raise
        except Exception as exc:
            if not self._tokens.is_current(token):
                _logger.debug("%s call %r failed after being superseded", self._name, token)
                return None
            _logger.debug("%s call %r failed", self._name, token, exc_info=True)
            return Outcome(error=self._classify(exc))

        if not self._tokens.is_current(token):
            _logger.debug("%s call %r settled after being superseded; discarding", self._name, token)
            return None
        return Outcome(value=value)

    def _classify(self, exc: Exception) -> Exception:
        if isinstance(exc, RequestError):
            return exc
        error = ClientRequestError(str(exc) or type(exc).__name__)
        error.__cause__ = exc
        if self._report is not None:
            self._report(error)
        return error


def resolve_injection_key(option: InjectionOption, default: InjectionKey) -> Key:
    """Map an ``injection_key`` option to the key a resource publishes under."""
    if option is None or isinstance(option, bool):
        return default
    return option


def publish_if_requested(resource: Any, registry: Registry | None, option: InjectionOption) -> None:
    """Publish *resource* when a registry is given and the option asks for it."""
    if registry is None or option is None or option is False:
        return
    with_injection(registry, resource)
