"""Tests for wire and state models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyrestore.models import (
    ListResourceState,
    ListStatus,
    PageData,
    PaginationQuery,
    RequestConfig,
    ResponseEnvelope,
    SortableQuery,
)


class TestPagination:
    def test_defaults(self) -> None:
        query = PaginationQuery()
        assert query.page == 0
        assert query.size == 20

    @pytest.mark.parametrize("values", [{"page": -1}, {"size": 0}])
    def test_rejects_out_of_range(self, values: dict[str, int]) -> None:
        with pytest.raises(ValidationError):
            PaginationQuery(**values)

    def test_sortable_query_order(self) -> None:
        assert SortableQuery(field="name").order == "asc"
        with pytest.raises(ValidationError):
            SortableQuery(field="name", order="sideways")  # type: ignore[arg-type]


class TestPageData:
    def test_empty(self) -> None:
        empty = PageData.empty()
        assert empty.items == []
        assert (empty.page, empty.size, empty.total) == (0, 0, 0)

    def test_total_is_independent_of_items(self) -> None:
        data = PageData.model_validate({"items": [{"id": 1}], "page": 3, "size": 20, "total": 61})
        assert len(data.items) == 1
        assert data.total == 61

    def test_rejects_more_items_than_size(self) -> None:
        with pytest.raises(ValidationError):
            PageData(items=[1, 2, 3], page=0, size=2, total=3)

    def test_parametrized_items(self) -> None:
        data = PageData[int].model_validate({"items": ["1", 2], "size": 2, "total": 2})
        assert data.items == [1, 2]


class TestEnvelope:
    def test_parses_standard_envelope(self) -> None:
        envelope = ResponseEnvelope.model_validate({"code": "0", "message": "ok", "data": {"id": 1}})
        assert envelope.code == 0
        assert envelope.data == {"id": 1}

    def test_message_and_data_optional(self) -> None:
        envelope = ResponseEnvelope.model_validate({"code": 0})
        assert envelope.message == ""
        assert envelope.data is None

    def test_code_required(self) -> None:
        with pytest.raises(ValidationError):
            ResponseEnvelope.model_validate({"data": 1})


class TestRequestConfig:
    def test_method_is_normalised(self) -> None:
        assert RequestConfig(method="put").method == "PUT"

    def test_merged_overrides_fields_and_merges_headers(self) -> None:
        base = RequestConfig(method="GET", url="/users", headers={"A": "1", "B": "1"}, timeout=10)

        merged = base.merged({"method": "post", "headers": {"B": "2"}})

        assert merged.method == "POST"
        assert merged.url == "/users"
        assert merged.headers == {"A": "1", "B": "2"}
        assert merged.timeout == 10

    def test_merged_with_model_only_uses_set_fields(self) -> None:
        base = RequestConfig(url="/users", timeout=10)

        merged = base.merged(RequestConfig(method="DELETE"))

        assert merged.method == "DELETE"
        assert merged.url == "/users"
        assert merged.timeout == 10

    def test_unknown_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RequestConfig.model_validate({"url": "/x", "signal": None})


def test_list_state_snapshot_defaults() -> None:
    state = ListResourceState()
    assert state.status is ListStatus.IDLE
    assert state.data == PageData.empty()
    assert state.error is None
