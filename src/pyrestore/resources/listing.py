"""Paginated collection resource."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel

from pyrestore._constants import DEFAULT_PAGE_SIZE
from pyrestore._token import RequestToken
from pyrestore.gateway import RequestGateway
from pyrestore.models.pagination import PageData, PaginationQuery
from pyrestore.models.request import config_fields
from pyrestore.models.state import ListResourceState, ListStatus
from pyrestore.resources._base import (
    InjectionOption,
    RequestTracker,
    publish_if_requested,
    resolve_injection_key,
)
from pyrestore.state.cell import Cell
from pyrestore.state.registry import InjectionKey, Registry
from pyrestore.utils import resolve_async_value, resolve_value

_logger = logging.getLogger(__name__)

LIST_RESOURCE_KEY = InjectionKey("ListResource")


def _as_query_dict(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Cannot use {type(value).__name__} as query parameters")


@dataclasses.dataclass(frozen=True)
class ListResourceOptions:
    """Configuration of a :class:`ListResource`.

    Parameters
    ----------
    url : str or callable
        Collection URL, or ``fn(initial_params) -> str``.
    initial_params : Any
        Static parameters, or a (possibly async) zero-argument factory.
        Included in every default fetch query.
    default_search : Any
        Search applied before the first fetch, or a (possibly async)
        ``fn(initial_params)``.
    create_fetch_query : callable or None
        ``fn(initial_params, search, pagination) -> mapping`` replacing the
        default query merge.
    fetch_config : Any
        Extra request config (mapping or ``fn() -> mapping``).
    transform_response : callable or None
        ``fn(unwrapped_data) -> PageData | mapping`` for servers whose page
        payload is not ``{items, page, size, total}``.
    transform_items : callable or None
        ``fn(items) -> items`` applied to every fetched page.
    immediate : bool
        Fetch as part of :meth:`ListResource.initialize`.
    post_fetch : callable or None
        Called after every committed successful fetch.
    page_size : int
        Initial ``pagination.size``.
    injection_key : bool, str or InjectionKey
        Publish the resource in the registry passed to the constructor;
        ``True`` uses :data:`LIST_RESOURCE_KEY`.
    """

    url: str | Callable[..., str]
    initial_params: Any = None
    default_search: Any = None
    create_fetch_query: Callable[[Any, Any, PaginationQuery], Mapping[str, Any]] | None = None
    fetch_config: Any = None
    transform_response: Callable[[Any], Any] | None = None
    transform_items: Callable[[list[Any]], list[Any]] | None = None
    immediate: bool = True
    post_fetch: Callable[[], None] | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    injection_key: InjectionOption = None


class ListResource:
    """Search filters, pagination and the current page of a remote collection.

    Every state field is a :class:`~pyrestore.state.Cell`. Only the
    operations below write to them.

    ``fetch`` is last-call-wins: starting a fetch aborts the one in flight,
    and a superseded fetch never writes ``data``, ``error`` or ``loading``.
    """

    def __init__(
        self,
        gateway: RequestGateway,
        options: ListResourceOptions,
        *,
        registry: Registry | None = None,
    ) -> None:
        self._gateway = gateway
        self._options = options
        self._fetches = RequestTracker("fetch", gateway.request_error_handler)

        self.initial_params: Cell[Any] = Cell({}, name="initial_params")
        self.search: Cell[Any] = Cell({}, name="search")
        self.pagination: Cell[PaginationQuery] = Cell(
            PaginationQuery(page=0, size=options.page_size),
            name="pagination",
        )
        self.data: Cell[PageData] = Cell(PageData.empty(), name="data")
        self.loading: Cell[bool] = Cell(False, name="loading")
        self.error: Cell[Exception | None] = Cell(None, name="error")
        self.status: Cell[ListStatus] = Cell(ListStatus.IDLE, name="status")

        self.injection_key = resolve_injection_key(options.injection_key, LIST_RESOURCE_KEY)
        publish_if_requested(self, registry, options.injection_key)

    @property
    def options(self) -> ListResourceOptions:
        return self._options

    @property
    def token(self) -> RequestToken | None:
        return self._fetches.token

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Resolve initial params and default search, then fetch unless suppressed."""
        if self._options.initial_params is not None:
            self.initial_params.set(await resolve_async_value(self._options.initial_params))

        if self._options.default_search is not None:
            self.search.set(await resolve_async_value(self._options.default_search, self.initial_params.get()))

        if self._options.immediate:
            await self.fetch()

    async def fetch(self) -> None:
        """Fetch the current page; supersedes any fetch in flight.

        Cancelling the calling task releases the fetch and clears ``loading``.
        """
        previous = self.status.get()
        self.error.set(None)
        self.loading.set(True)
        self.status.set(ListStatus.FETCHING)

        outcome = await self._fetches.run(self._fetch_page, on_abandon=lambda: self._abandon(previous))
        if outcome is None:
            return

        if outcome.error is not None:
            self.error.set(outcome.error)
            self.loading.set(False)
            self.status.set(ListStatus.ERRORED)
            return

        self.data.set(outcome.value)
        self.loading.set(False)
        self.status.set(ListStatus.READY)
        _logger.debug("Fetched page %d (%d items of %d)", outcome.value.page, len(outcome.value.items), outcome.value.total)

        if self._options.post_fetch is not None:
            self._options.post_fetch()

    async def set_search(self, value: Any) -> None:
        """Replace the search wholesale, go back to the first page and fetch."""
        self.search.set(value)
        self.pagination.set(self.pagination.get().model_copy(update={"page": 0}))
        await self.fetch()

    async def set_pagination(self, value: Any) -> None:
        """Merge a pagination update and fetch.

        *value* is a partial pagination (mapping or :class:`PaginationQuery`)
        or ``fn(current_pagination)`` returning one, e.g.
        ``lambda p: {"page": p.page + 1}``.
        """
        current = self.pagination.get()
        update = config_fields(resolve_value(value, current))
        self.pagination.set(PaginationQuery.model_validate({**current.model_dump(), **update}))
        await self.fetch()

    def set_initial_params(self, value: Any) -> None:
        """Replace the initial params. Does not fetch."""
        self.initial_params.set(value)

    def dispose(self) -> None:
        """Abort the fetch in flight; its result will be discarded."""
        self._fetches.cancel()

    def snapshot(self) -> ListResourceState:
        return ListResourceState(
            status=self.status.get(),
            initial_params=self.initial_params.get(),
            search=self.search.get(),
            pagination=self.pagination.get(),
            data=self.data.get(),
            loading=self.loading.get(),
            error=self.error.get(),
            token=self.token,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _abandon(self, previous: ListStatus) -> None:
        self.loading.set(False)
        self.status.set(ListStatus.IDLE if previous is ListStatus.FETCHING else previous)

    def _fetch_query(self) -> dict[str, Any]:
        """Query for the next fetch.

        Defaults to ``initial_params``, then ``search``, then ``pagination``
        merged in that order; later sources win on key collision.
        """
        initial_params = self.initial_params.get()
        search = self.search.get()
        pagination = self.pagination.get()
        if self._options.create_fetch_query is not None:
            return dict(self._options.create_fetch_query(initial_params, search, pagination))
        return {
            **_as_query_dict(initial_params),
            **_as_query_dict(search),
            **pagination.model_dump(),
        }

    async def _fetch_page(self, token: RequestToken) -> PageData:
        url = resolve_value(self._options.url, self.initial_params.get())
        payload = await self._gateway.get(
            url,
            self._fetch_query(),
            config=resolve_value(self._options.fetch_config),
            token=token,
        )
        return self._to_page(payload)

    def _to_page(self, payload: Any) -> PageData:
        response = payload
        if self._options.transform_response is not None:
            response = self._options.transform_response(payload)
        page = response if isinstance(response, PageData) else PageData.model_validate(response)

        items = list(page.items)
        if self._options.transform_items is not None:
            items = list(self._options.transform_items(items))
        return PageData(items=items, page=page.page, size=page.size, total=page.total)


async def create_list_resource(
    gateway: RequestGateway,
    options: ListResourceOptions,
    *,
    registry: Registry | None = None,
) -> ListResource:
    """Build a :class:`ListResource`, publish it if requested, and initialize it."""
    resource = ListResource(gateway, options, registry=registry)
    await resource.initialize()
    return resource
