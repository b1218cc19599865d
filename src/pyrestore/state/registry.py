"""Scoped publish/lookup registry.

A resource owner publishes its resource under a key; code further down
the tree receives the registry (or a :meth:`Registry.child` of it) and
looks the resource up by the same key. Lookups walk up the parent chain
and fail loudly when nothing was published.
"""

from __future__ import annotations

import logging
from typing import Any

from pyrestore.exceptions import RegistryKeyError, ResourceConfigError

_logger = logging.getLogger(__name__)


class InjectionKey:
    """Identity-compared key; two keys with the same name are distinct."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"InjectionKey({self.name!r})"


Key = str | InjectionKey


class Registry:
    """Keyed registry with an optional parent scope."""

    def __init__(self, parent: Registry | None = None) -> None:
        self._parent = parent
        self._values: dict[Key, Any] = {}

    @property
    def parent(self) -> Registry | None:
        return self._parent

    def child(self) -> Registry:
        """Create a descendant scope that sees everything published here."""
        return Registry(parent=self)

    def publish(self, key: Key, value: Any) -> None:
        """Publish *value* under *key* in this scope, shadowing ancestors."""
        _logger.debug("Publishing %r under %r", type(value).__name__, key)
        self._values[key] = value

    def lookup(self, key: Key) -> Any:
        """Return the nearest value published under *key*.

        Raises
        ------
        RegistryKeyError
            If neither this scope nor an ancestor published *key*.
        """
        scope: Registry | None = self
        while scope is not None:
            if key in scope._values:
                return scope._values[key]
            scope = scope._parent
        raise RegistryKeyError(key)

    def __contains__(self, key: object) -> bool:
        scope: Registry | None = self
        while scope is not None:
            if key in scope._values:
                return True
            scope = scope._parent
        return False


def with_injection(registry: Registry, value: Any, key: Key | None = None) -> Any:
    """Publish *value* under *key*, or under its own ``injection_key``.

    Returns *value* so the call can wrap construction inline.
    """
    resolved = key if key is not None else getattr(value, "injection_key", None)
    if resolved is None:
        raise ResourceConfigError("Injection key is not defined")
    registry.publish(resolved, value)
    return value


def inject(registry: Registry, key: Key) -> Any:
    """Look up the value published under *key* (see :meth:`Registry.lookup`)."""
    return registry.lookup(key)
