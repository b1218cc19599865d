"""Data models for wire payloads and resource state."""

from pyrestore.models._base import WireModel
from pyrestore.models.envelope import ResponseEnvelope
from pyrestore.models.pagination import PageData, PaginationQuery, SortableQuery
from pyrestore.models.request import RequestConfig
from pyrestore.models.state import (
    EditResourceState,
    EditStatus,
    ListResourceState,
    ListStatus,
    MutationResourceState,
)

__all__ = [
    "EditResourceState",
    "EditStatus",
    "ListResourceState",
    "ListStatus",
    "MutationResourceState",
    "PageData",
    "PaginationQuery",
    "RequestConfig",
    "ResponseEnvelope",
    "SortableQuery",
    "WireModel",
]
