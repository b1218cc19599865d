"""Gateway configuration for pyrestore."""

from __future__ import annotations

import dataclasses
import json
import os
from typing import Any

from pyrestore._constants import BASE_URL, DEFAULT_TIMEOUT_S, USER_AGENT
from pyrestore.exceptions import ResourceConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class GatewayConfig:
    """Base request configuration shared by every call through a gateway.

    Parameters
    ----------
    base_url : str
        Prefix joined with relative request URLs. Absolute request URLs
        (``http://`` / ``https://``) are used unchanged.
    timeout : float
        Default total request timeout in seconds. A request config may
        override it per call.
    user_agent : str
        ``User-Agent`` header sent unless the caller supplies one.
    headers : dict[str, str]
        Default headers (auth tokens etc.). Caller headers win per key.
    trace_enabled : bool
        Log every merged request config (redacted) at DEBUG level.
    """

    base_url: str = BASE_URL
    timeout: float = DEFAULT_TIMEOUT_S
    user_agent: str = USER_AGENT
    headers: dict[str, str] = dataclasses.field(default_factory=dict)
    trace_enabled: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> GatewayConfig:
        """Create configuration from environment variables.

        Reads ``RESTORE_BASE_URL``, ``RESTORE_TIMEOUT``,
        ``RESTORE_USER_AGENT``, ``RESTORE_HEADERS`` (a JSON object) and
        ``RESTORE_TRACE_ENABLED``. Explicit keyword arguments override
        environment values.

        Raises
        ------
        ResourceConfigError
            If ``RESTORE_HEADERS`` or ``RESTORE_TIMEOUT`` cannot be parsed.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_CONFIG_MAP = {
            "RESTORE_BASE_URL": "base_url",
            "RESTORE_USER_AGENT": "user_agent",
        }
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("RESTORE_TIMEOUT")
        if timeout_env is not None and "timeout" not in overrides:
            try:
                config_kwargs["timeout"] = float(timeout_env)
            except ValueError as exc:
                raise ResourceConfigError(f"RESTORE_TIMEOUT is not a number: {timeout_env!r}") from exc

        headers_env = env.get("RESTORE_HEADERS")
        if headers_env is not None and "headers" not in overrides:
            try:
                headers = json.loads(headers_env)
            except json.JSONDecodeError as exc:
                raise ResourceConfigError("RESTORE_HEADERS is not valid JSON") from exc
            if not isinstance(headers, dict):
                raise ResourceConfigError("RESTORE_HEADERS must be a JSON object")
            config_kwargs["headers"] = {str(k): str(v) for k, v in headers.items()}

        if "trace_enabled" not in overrides:
            config_kwargs["trace_enabled"] = _env_bool(env.get("RESTORE_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
