"""Request configuration model passed from resources to the gateway."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def config_fields(config: BaseModel | Mapping[str, Any] | None) -> dict[str, Any]:
    """Return only the fields a caller actually set, ready to override defaults.

    Works for any pydantic model, so a partial ``PaginationQuery(page=3)``
    carries ``page`` alone.
    """
    if config is None:
        return {}
    if isinstance(config, BaseModel):
        return {name: getattr(config, name) for name in config.model_fields_set}
    return dict(config)


class RequestConfig(BaseModel):
    """A single HTTP call, before and after merging with gateway defaults.

    Parameters
    ----------
    method : str
        HTTP method, normalised to upper case.
    url : str
        Absolute URL, or a path joined onto the gateway's ``base_url``.
    params : dict or None
        Query parameters.
    data : Any
        JSON request body.
    headers : dict[str, str]
        Request headers.
    timeout : float or None
        Total timeout in seconds; ``None`` uses the gateway default.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: str = "GET"
    url: str = ""
    params: dict[str, Any] | None = None
    data: Any = None
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float | None = None

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        method = value.strip().upper()
        if not method:
            raise ValueError("method must be non-empty")
        return method

    def merged(self, overrides: RequestConfig | Mapping[str, Any] | None) -> RequestConfig:
        """Return a copy with *overrides* applied on top of this config.

        Fields present in *overrides* win. Headers are merged per key so an
        override can add a header without dropping the defaults.
        """
        if overrides is None:
            return self
        values = config_fields(overrides)
        headers = {**self.headers, **(values.pop("headers", None) or {})}
        return RequestConfig.model_validate({**dict(self), **values, "headers": headers})
