"""Resolution of "value or function of context" configuration fields.

Most resource options accept either a literal or a callable that computes
the value from the resource's current state, e.g.::

    url="/users"
    url=lambda initial_params: f"/orgs/{initial_params['org']}/users"

:func:`resolve_value` and :func:`resolve_async_value` turn such a field
into its concrete value. Context is passed positionally, trimmed to the
number of positional parameters the callable declares, so a zero-argument
``lambda: "/users"`` works wherever a context is available.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, TypeVar

R = TypeVar("R")


def is_function(value: object) -> bool:
    """Return ``True`` when *value* should be called rather than used as-is."""
    return callable(value)


def _positional_capacity(fn: Callable[..., Any]) -> int | None:
    """Number of positional params *fn* accepts, or ``None`` for unbounded."""
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without introspection data: assume they take everything.
        return None
    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def _call(fn: Callable[..., Any], params: tuple[Any, ...]) -> Any:
    capacity = _positional_capacity(fn)
    if capacity is None:
        return fn(*params)
    return fn(*params[:capacity])


def resolve_value(valuable: Any, *params: Any) -> Any:
    """Return the value of *valuable*.

    If *valuable* is callable it is called with *params* and its return
    value is returned. Otherwise *valuable* is returned unchanged.
    Exceptions raised by the callable propagate.
    """
    if is_function(valuable):
        return _call(valuable, params)
    return valuable


async def resolve_async_value(valuable: Any, *params: Any) -> Any:
    """Like :func:`resolve_value`, awaiting the result if it is awaitable.

    The result is awaited at most once; plain return values are passed
    through without touching the event loop.
    """
    if is_function(valuable):
        returned = _call(valuable, params)
        if inspect.isawaitable(returned):
            return await returned
        return returned
    return valuable
