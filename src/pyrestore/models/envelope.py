"""Standard response envelope ``{code, message, data}``."""

from __future__ import annotations

from typing import Generic, TypeVar

from pyrestore.models._base import WireModel

T = TypeVar("T")


class ResponseEnvelope(WireModel, Generic[T]):
    """Wrapper the server puts around every response payload.

    ``code`` is an application-level status, independent of the HTTP
    status of the response carrying it.
    """

    code: int
    message: str = ""
    data: T | None = None
