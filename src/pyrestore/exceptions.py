"""Custom exception hierarchy for pyrestore."""

from __future__ import annotations

from typing import Any


class ResourceError(Exception):
    """Base exception for all pyrestore errors."""


class ResourceConfigError(ResourceError):
    """Invalid or missing resource configuration (programmer error).

    Raised before any network activity, e.g. when ``submit()`` is called
    on an edit resource that declares no ``submit_url``.
    """


class RegistryKeyError(ResourceError, KeyError):
    """No value was published under the requested injection key."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"No value published for key {key!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class TransportConnectionError(ResourceError):
    """The request was sent but no response was received."""


class RequestError(ResourceError):
    """A classified request failure raised by the gateway.

    ``handled`` is set once the gateway has finished reporting the failure
    (notification or auth hook), so callers know not to report it again.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
        payload: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.url = url
        self.payload = payload
        self.handled = False
        super().__init__(message)


class RequestCancelledError(RequestError):
    """The request was aborted because a newer operation superseded it."""


class AuthFailureError(RequestError):
    """Server answered HTTP 401; the session is no longer valid."""


class ServerError(RequestError):
    """Server answered with a non-success HTTP status or a malformed body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
        payload: Any = None,
        code: int | None = None,
    ) -> None:
        self.code = code
        super().__init__(message, status_code=status_code, url=url, payload=payload)


class NetworkError(RequestError):
    """Request was dispatched but no response arrived (connectivity, timeout)."""


class ClientRequestError(RequestError):
    """Request failed before it was dispatched (bad config, invalid URL)."""
