"""Scrubbing of request configs before they reach the trace log.

With ``GatewayConfig.trace_enabled`` the gateway logs every merged
:class:`~pyrestore.models.request.RequestConfig` at DEBUG. Credential
headers (``Authorization``, cookies, API keys) are masked by exact name;
body and query fields are masked when their name mentions a password,
secret, token or API key, so ``refresh_token`` and ``newPassword`` are
both caught. Long strings are clipped so a large upload body does not
flood the log.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

REDACTED = "<redacted>"

_CREDENTIAL_HEADERS: frozenset[str] = frozenset(
    {"authorization", "proxy-authorization", "cookie", "set-cookie", "x-api-key"}
)
_SENSITIVE_FIELD_MARKERS: tuple[str, ...] = ("password", "secret", "token", "api_key", "apikey")
_MAX_DEPTH = 20


def _is_sensitive(name: str) -> bool:
    lowered = name.lower()
    if lowered in _CREDENTIAL_HEADERS:
        return True
    return any(marker in lowered for marker in _SENSITIVE_FIELD_MARKERS)


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…<truncated>"


def _scrub(value: Any, limit: int, depth: int) -> Any:
    if depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _clip(value, limit)
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, BaseModel):
        return _scrub(value.model_dump(), limit, depth + 1)
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED if _is_sensitive(str(key)) else _scrub(item, limit, depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_scrub(item, limit, depth + 1) for item in value]
    return _clip(repr(value), limit)


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a JSON-friendly copy of *value* with credentials masked.

    Accepts request configs (or any pydantic model), mappings and
    sequences. The input is never modified.
    """
    return _scrub(value, max_string, 0)
