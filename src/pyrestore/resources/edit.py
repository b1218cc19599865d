"""Single-record create/update resource."""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pyrestore._token import RequestToken
from pyrestore.exceptions import ResourceConfigError
from pyrestore.gateway import RequestGateway
from pyrestore.models.request import config_fields
from pyrestore.models.state import EditResourceState, EditStatus
from pyrestore.resources._base import (
    InjectionOption,
    RequestTracker,
    publish_if_requested,
    resolve_injection_key,
)
from pyrestore.state.cell import Cell
from pyrestore.state.registry import InjectionKey, Registry
from pyrestore.utils import is_function, resolve_async_value, resolve_value

_logger = logging.getLogger(__name__)

EDIT_RESOURCE_KEY = InjectionKey("EditResource")


def _settled(status: EditStatus) -> EditStatus:
    if status in (EditStatus.LOADING, EditStatus.SUBMITTING):
        return EditStatus.IDLE
    return status


@dataclasses.dataclass(frozen=True)
class EditResourceOptions:
    """Configuration of an :class:`EditResource`.

    Callable options receive the context named in brackets, trimmed to the
    parameters they declare.

    Parameters
    ----------
    initial_params : Any
        Static parameters, or a (possibly async) zero-argument factory.
    default_form_data : Any
        Draft for create mode, or a (possibly async)
        ``fn(initial_params, action_params)``. Defaults to ``{}``.
    fetch_url : str, callable or None
        Where to load the record in edit mode [``action_params``]. Without
        it the draft is a deep copy of ``action_params``.
    fetch_config : Any
        Extra request config for the load [``action_params``].
    transform_fetch_response : callable or None
        ``fn(unwrapped_data) -> draft``.
    submit_url : str, callable or None
        Where to submit [``action_params, data, is_edit``]. Required by
        :meth:`EditResource.submit`.
    submit_config : Any
        Extra request config for the submit, e.g. ``{"method": "PATCH"}``
        [``action_params, data, is_edit``].
    transform_form_data_to_request_data : callable or None
        ``fn(data, initial_params) -> body``.
    pre_action : callable or None
        Called when an add or edit begins.
    post_submit : callable or None
        ``fn(response)`` called once when a submit settles; ``response`` is
        ``None`` on failure.
    injection_key : bool, str or InjectionKey
        Publish the resource in the registry passed to the constructor.
    """

    initial_params: Any = None
    default_form_data: Any = None
    fetch_url: str | Callable[..., str] | None = None
    fetch_config: Any = None
    transform_fetch_response: Callable[[Any], Any] | None = None
    submit_url: str | Callable[..., str] | None = None
    submit_config: Any = None
    transform_form_data_to_request_data: Callable[[Any, Any], Any] | None = None
    pre_action: Callable[[], None] | None = None
    post_submit: Callable[[Any], None] | None = None
    injection_key: InjectionOption = None


class EditResource:
    """Draft of one record, in create (``POST``) or update (``PUT``) mode.

    Loading the draft and submitting it are tracked independently: a new
    ``begin_add``/``begin_edit``/``reset`` supersedes a pending load, a new
    ``submit`` supersedes a pending submit, and neither cancels the other.
    """

    def __init__(
        self,
        gateway: RequestGateway,
        options: EditResourceOptions,
        *,
        registry: Registry | None = None,
    ) -> None:
        self._gateway = gateway
        self._options = options
        self._loads = RequestTracker("load", gateway.request_error_handler)
        self._submits = RequestTracker("submit", gateway.request_error_handler)
        self._initialized = False

        self.initial_params: Cell[Any] = Cell({}, name="initial_params")
        self.action_params: Cell[Any] = Cell({}, name="action_params")
        self.data: Cell[Any] = Cell({}, name="data")
        self.is_edit: Cell[bool] = Cell(False, name="is_edit")
        self.loading: Cell[bool] = Cell(False, name="loading")
        self.saving: Cell[bool] = Cell(False, name="saving")
        self.error: Cell[Exception | None] = Cell(None, name="error")
        self.status: Cell[EditStatus] = Cell(EditStatus.IDLE, name="status")
        self.submit_response: Cell[Any] = Cell(None, name="submit_response")

        self.injection_key = resolve_injection_key(options.injection_key, self._default_injection_key())
        publish_if_requested(self, registry, options.injection_key)

    def _default_injection_key(self) -> InjectionKey:
        return EDIT_RESOURCE_KEY

    @property
    def options(self) -> EditResourceOptions:
        return self._options

    @property
    def token(self) -> RequestToken | None:
        """Token of the pending submit, if any."""
        return self._submits.token

    @property
    def load_token(self) -> RequestToken | None:
        return self._loads.token

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Resolve ``initial_params``. Runs once; later calls are no-ops."""
        if self._initialized:
            return
        self._initialized = True
        if self._options.initial_params is not None:
            self.initial_params.set(await resolve_async_value(self._options.initial_params))

    def set_initial_params(self, value: Any) -> None:
        self._initialized = True
        self.initial_params.set(value)

    async def begin_add(self, action_params: Any = None) -> None:
        """Start creating a record from ``default_form_data``."""
        await self.initialize()
        self._pre_action()
        self.is_edit.set(False)
        self.action_params.set(action_params if action_params is not None else {})
        await self._load(self._default_form_data)

    async def begin_edit(self, action_params: Any) -> None:
        """Start editing the record identified by *action_params*."""
        await self.initialize()
        self._pre_action()
        self.is_edit.set(True)
        self.action_params.set(action_params if action_params is not None else {})
        await self._load(self._fetch_form_data)

    async def reset(self) -> None:
        """Reload the draft for the current mode, dropping unsaved edits."""
        await self._load(self._fetch_form_data if self.is_edit.get() else self._default_form_data)

    async def submit(self) -> Any:
        """Send the draft; ``PUT`` in edit mode, ``POST`` in create mode.

        Returns the unwrapped response, or ``None`` if the submit failed or
        was superseded.

        Raises
        ------
        ResourceConfigError
            No ``submit_url`` is configured. Nothing is sent.
        """
        if not self._options.submit_url:
            raise ResourceConfigError("submit_url is required")

        self.submit_response.set(None)
        self.error.set(None)
        previous = self.status.get()
        self.saving.set(True)
        self.status.set(EditStatus.SUBMITTING)

        outcome = await self._submits.run(self._send_draft, on_abandon=lambda: self._abandon_submit(previous))
        if outcome is None:
            return None

        if outcome.error is not None:
            # The draft is kept so the user can fix it and retry.
            self.error.set(outcome.error)
            self.saving.set(False)
            self.status.set(EditStatus.ERRORED)
            self._post_submit(None)
            return None

        self.submit_response.set(outcome.value)
        self.saving.set(False)
        self.status.set(EditStatus.READY)
        self._post_submit(outcome.value)
        return outcome.value

    def dispose(self) -> None:
        """Abort any pending load or submit; their results are discarded."""
        self._loads.cancel()
        self._submits.cancel()

    def snapshot(self) -> EditResourceState:
        return EditResourceState(
            status=self.status.get(),
            initial_params=self.initial_params.get(),
            action_params=self.action_params.get(),
            data=self.data.get(),
            is_edit=self.is_edit.get(),
            loading=self.loading.get(),
            saving=self.saving.get(),
            error=self.error.get(),
            token=self.token,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _pre_action(self) -> None:
        self.saving.set(False)
        self.data.set({})
        if self._options.pre_action is not None:
            self._options.pre_action()

    def _post_submit(self, response: Any) -> None:
        if self._options.post_submit is not None:
            self._options.post_submit(response)

    async def _load(self, loader: Callable[[RequestToken], Awaitable[Any]]) -> None:
        previous = self.status.get()
        self.error.set(None)
        self.loading.set(True)
        self.status.set(EditStatus.LOADING)

        outcome = await self._loads.run(loader, on_abandon=lambda: self._abandon_load(previous))
        if outcome is None:
            return

        if outcome.error is not None:
            self.error.set(outcome.error)
            self.loading.set(False)
            self.status.set(EditStatus.ERRORED)
            return

        self.data.set(outcome.value)
        self.loading.set(False)
        self.status.set(EditStatus.READY)

    def _abandon_load(self, previous: EditStatus) -> None:
        self.loading.set(False)
        self.status.set(_settled(previous))

    def _abandon_submit(self, previous: EditStatus) -> None:
        self.saving.set(False)
        self.status.set(_settled(previous))

    async def _default_form_data(self, token: RequestToken) -> Any:
        default = self._options.default_form_data
        if default is None:
            return {}
        if not is_function(default):
            return copy.deepcopy(default)
        return await resolve_async_value(default, self.initial_params.get(), self.action_params.get())

    async def _fetch_form_data(self, token: RequestToken) -> Any:
        action_params = self.action_params.get()
        if not self._options.fetch_url:
            return copy.deepcopy(action_params)

        url = resolve_value(self._options.fetch_url, action_params)
        response = await self._gateway.get(
            url,
            config=resolve_value(self._options.fetch_config, action_params),
            token=token,
        )
        if self._options.transform_fetch_response is not None:
            return self._options.transform_fetch_response(response)
        return response

    async def _send_draft(self, token: RequestToken) -> Any:
        action_params = self.action_params.get()
        data = self.data.get()
        is_edit = self.is_edit.get()

        url = resolve_value(self._options.submit_url, action_params, data, is_edit)
        body = data
        if self._options.transform_form_data_to_request_data is not None:
            body = self._options.transform_form_data_to_request_data(data, self.initial_params.get())

        config = {
            "method": "PUT" if is_edit else "POST",
            "url": url,
            "data": body,
            **config_fields(resolve_value(self._options.submit_config, action_params, data, is_edit)),
        }
        _logger.debug("Submitting %s draft to %s", "edited" if is_edit else "new", url)
        return await self._gateway.request(config, token=token)
