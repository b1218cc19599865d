"""Modal visibility state, alone or wrapped around an edit resource."""

from __future__ import annotations

import dataclasses
from typing import Any

from pyrestore.gateway import RequestGateway
from pyrestore.resources.edit import EditResource, EditResourceOptions
from pyrestore.state.cell import Cell
from pyrestore.state.registry import InjectionKey, Registry
from pyrestore.utils import resolve_value

MODAL_RESOURCE_KEY = InjectionKey("ModalResource")
EDIT_MODAL_RESOURCE_KEY = InjectionKey("EditModalResource")


class ModalResource:
    """Whether a modal is shown and which params it was opened with."""

    injection_key = MODAL_RESOURCE_KEY

    def __init__(self, initial_params: Any = None) -> None:
        resolved = resolve_value(initial_params)
        self.visible: Cell[bool] = Cell(False, name="visible")
        self.initial_params: Cell[Any] = Cell(resolved if resolved is not None else {}, name="initial_params")
        self.params: Cell[Any] = Cell(None, name="params")

    def open(self, params: Any = None) -> None:
        self.params.set(params)
        self.visible.set(True)

    def close(self) -> None:
        self.visible.set(False)


class EditModalResource(EditResource):
    """Edit resource shown in a modal.

    Beginning an add or edit opens the modal; a settled submit closes it.
    Caller ``pre_action``/``post_submit`` hooks still run, after the modal
    has been toggled. ``modal.initial_params`` follows the form's
    ``initial_params``.
    """

    def __init__(
        self,
        gateway: RequestGateway,
        options: EditResourceOptions,
        *,
        registry: Registry | None = None,
    ) -> None:
        self.modal = ModalResource()
        caller_pre_action = options.pre_action
        caller_post_submit = options.post_submit

        def _pre_action() -> None:
            self.modal.open()
            if caller_pre_action is not None:
                caller_pre_action()

        def _post_submit(response: Any) -> None:
            self.modal.close()
            if caller_post_submit is not None:
                caller_post_submit(response)

        super().__init__(
            gateway,
            dataclasses.replace(options, pre_action=_pre_action, post_submit=_post_submit),
            registry=registry,
        )
        # The modal shows the same initial params the form was built with.
        self.initial_params.subscribe(lambda new, old: self.modal.initial_params.set(new))

    def _default_injection_key(self) -> InjectionKey:
        return EDIT_MODAL_RESOURCE_KEY

    @property
    def visible(self) -> Cell[bool]:
        return self.modal.visible

    def close(self) -> None:
        """Dismiss the modal without submitting; a pending submit is abandoned."""
        self._submits.cancel()
        self.saving.set(False)
        self.modal.close()
