"""Pagination query and page payload models."""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import Field, model_validator

from pyrestore._constants import DEFAULT_PAGE_SIZE
from pyrestore.models._base import WireModel

ItemT = TypeVar("ItemT")


class PaginationQuery(WireModel):
    """Requested page. ``page`` is zero-based."""

    page: int = Field(default=0, ge=0)
    size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)


class SortableQuery(WireModel):
    """Sort directive a search object may carry."""

    field: str
    order: Literal["asc", "desc"] = "asc"


class PageData(WireModel, Generic[ItemT]):
    """One page of a collection as reported by the server.

    ``total`` is the server-side row count and is unrelated to
    ``len(items)``. A page never holds more than ``size`` items; the
    ``size == 0`` placeholder used before the first fetch holds none.
    """

    items: list[ItemT] = Field(default_factory=list)
    page: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_page_bounds(self) -> PageData[ItemT]:
        if len(self.items) > self.size:
            raise ValueError(f"page holds {len(self.items)} items but size is {self.size}")
        return self

    @classmethod
    def empty(cls) -> PageData[Any]:
        return cls(items=[], page=0, size=0, total=0)
