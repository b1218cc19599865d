"""Base model for wire payloads.

Every model exchanged with the server inherits from :class:`WireModel`
which provides:

* ``alias_generator=to_camel`` so camelCase keys sent by the server map
  onto snake_case fields, while ``populate_by_name`` keeps snake_case
  construction working.
* Frozen instances: resources replace models wholesale, they never patch
  them in place.
* ``extra="ignore"`` so servers may add fields without breaking parsing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for server-facing models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
