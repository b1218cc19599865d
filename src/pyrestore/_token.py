"""Request tokens: "which operation is authoritative right now".

Every cancellable operation captures the token current at its start.
Issuing a new operation aborts the previous token *before* the new
network call starts; the aborted operation's transport task is cancelled
and its continuation, on waking, sees that its token is no longer current
and leaves the resource state alone.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable

_logger = logging.getLogger(__name__)

_generation = itertools.count(1)


class RequestToken:
    """Opaque handle for one in-flight operation."""

    __slots__ = ("_aborted", "_callbacks", "generation")

    def __init__(self) -> None:
        self.generation = next(_generation)
        self._aborted = False
        self._callbacks: list[Callable[[], None]] = []

    def __repr__(self) -> str:
        state = "aborted" if self._aborted else "live"
        return f"<RequestToken #{self.generation} {state}>"

    @property
    def aborted(self) -> bool:
        return self._aborted

    def abort(self) -> None:
        """Abort the operation. Idempotent; callbacks fire once."""
        if self._aborted:
            return
        self._aborted = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_abort(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register *callback* for abort; returns a function that unregisters it.

        If the token is already aborted the callback runs immediately.
        """
        if self._aborted:
            callback()
            return lambda: None
        self._callbacks.append(callback)

        def _remove() -> None:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

        return _remove


class TokenSlot:
    """Holds the single authoritative token of one resource operation kind."""

    __slots__ = ("_current", "_name")

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._current: RequestToken | None = None

    @property
    def current(self) -> RequestToken | None:
        return self._current

    def issue(self) -> RequestToken:
        """Abort the current token, then mint and store a fresh one."""
        previous = self._current
        if previous is not None and not previous.aborted:
            _logger.debug("Superseding %s token %r", self._name or "request", previous)
            previous.abort()
        token = RequestToken()
        self._current = token
        return token

    def is_current(self, token: RequestToken) -> bool:
        return token is self._current and not token.aborted

    def clear(self) -> None:
        """Abort and forget the current token."""
        previous, self._current = self._current, None
        if previous is not None:
            previous.abort()
