"""Resource stores.

Each resource owns a set of observable cells and the operations that
mutate them. Resources are independent: nothing is shared between
instances, and only the owning resource writes to its cells.
"""

from pyrestore.resources._base import Outcome, RequestTracker
from pyrestore.resources.edit import EDIT_RESOURCE_KEY, EditResource, EditResourceOptions
from pyrestore.resources.listing import (
    LIST_RESOURCE_KEY,
    ListResource,
    ListResourceOptions,
    create_list_resource,
)
from pyrestore.resources.modal import (
    EDIT_MODAL_RESOURCE_KEY,
    MODAL_RESOURCE_KEY,
    EditModalResource,
    ModalResource,
)
from pyrestore.resources.mutation import (
    MUTATION_RESOURCE_KEY,
    REMOVE_RESOURCE_KEY,
    MutationOptions,
    MutationResource,
    RemoveResource,
)

__all__ = [
    "EDIT_MODAL_RESOURCE_KEY",
    "EDIT_RESOURCE_KEY",
    "LIST_RESOURCE_KEY",
    "MODAL_RESOURCE_KEY",
    "MUTATION_RESOURCE_KEY",
    "REMOVE_RESOURCE_KEY",
    "EditModalResource",
    "EditResource",
    "EditResourceOptions",
    "ListResource",
    "ListResourceOptions",
    "ModalResource",
    "MutationOptions",
    "MutationResource",
    "Outcome",
    "RemoveResource",
    "RequestTracker",
    "create_list_resource",
]
