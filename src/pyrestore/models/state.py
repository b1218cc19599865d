"""Resource status enums and immutable state snapshots."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyrestore._token import RequestToken
from pyrestore.models.pagination import PageData, PaginationQuery


class ListStatus(StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    ERRORED = "errored"


class EditStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    ERRORED = "errored"


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)


class ListResourceState(_Snapshot):
    """Point-in-time copy of a :class:`~pyrestore.resources.listing.ListResource`."""

    status: ListStatus = ListStatus.IDLE
    initial_params: Any = Field(default_factory=dict)
    search: Any = Field(default_factory=dict)
    pagination: PaginationQuery = Field(default_factory=PaginationQuery)
    data: PageData = Field(default_factory=PageData.empty)
    loading: bool = False
    error: Exception | None = None
    token: RequestToken | None = None


class EditResourceState(_Snapshot):
    """Point-in-time copy of an :class:`~pyrestore.resources.edit.EditResource`."""

    status: EditStatus = EditStatus.IDLE
    initial_params: Any = Field(default_factory=dict)
    action_params: Any = Field(default_factory=dict)
    data: Any = Field(default_factory=dict)
    is_edit: bool = False
    loading: bool = False
    saving: bool = False
    error: Exception | None = None
    token: RequestToken | None = None


class MutationResourceState(_Snapshot):
    loading: bool = False
    finished: bool = False
    error: Exception | None = None
    response: Any = None
