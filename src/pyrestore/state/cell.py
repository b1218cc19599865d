"""Observable settable cell.

Resources keep each state field in a :class:`Cell`. The resource core only
ever calls :meth:`Cell.get` and :meth:`Cell.set`; views and bindings use
:meth:`Cell.subscribe` to react to changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Subscriber = Callable[[T, T], None]


def _changed(old: object, new: object) -> bool:
    if old is new:
        return False
    try:
        return bool(old != new)
    except Exception:
        # Objects with exotic __eq__ (e.g. arrays) count as changed.
        return True


class Cell(Generic[T]):
    """Holds one value and notifies subscribers when it changes."""

    __slots__ = ("_value", "_subscribers", "name")

    def __init__(self, value: T, *, name: str = "") -> None:
        self._value = value
        self._subscribers: list[Subscriber[T]] = []
        self.name = name

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"<Cell{label}={self._value!r}>"

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self.set(value)

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Store *value*; subscribers run with ``(new, old)`` if it changed."""
        old = self._value
        self._value = value
        if not _changed(old, value):
            return
        for subscriber in list(self._subscribers):
            try:
                subscriber(value, old)
            except Exception:
                _logger.debug("Subscriber of cell %s failed", self.name or "<anonymous>", exc_info=True)

    def subscribe(self, subscriber: Subscriber[T]) -> Callable[[], None]:
        """Register *subscriber*; returns a function that unsubscribes it."""
        self._subscribers.append(subscriber)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(subscriber)
            except ValueError:
                pass

        return _unsubscribe
