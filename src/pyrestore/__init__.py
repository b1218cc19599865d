"""pyrestore - Cancellation-safe async resource stores over an enveloped JSON API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyrestore")
except PackageNotFoundError:
    __version__ = "0+local"
from pyrestore._token import RequestToken, TokenSlot
from pyrestore._transport import AiohttpTransport, Transport, TransportResponse
from pyrestore.config import GatewayConfig
from pyrestore.exceptions import (
    AuthFailureError,
    ClientRequestError,
    NetworkError,
    RegistryKeyError,
    RequestCancelledError,
    RequestError,
    ResourceConfigError,
    ResourceError,
    ServerError,
    TransportConnectionError,
)
from pyrestore.gateway import RequestGateway
from pyrestore.models import (
    EditResourceState,
    EditStatus,
    ListResourceState,
    ListStatus,
    MutationResourceState,
    PageData,
    PaginationQuery,
    RequestConfig,
    ResponseEnvelope,
    SortableQuery,
)
from pyrestore.notify import LoggingNotifier, NotificationCategory, Notifier, RecordingNotifier
from pyrestore.resources import (
    EditModalResource,
    EditResource,
    EditResourceOptions,
    ListResource,
    ListResourceOptions,
    ModalResource,
    MutationOptions,
    MutationResource,
    RemoveResource,
    create_list_resource,
)
from pyrestore.state import Cell, InjectionKey, Registry, inject, with_injection
from pyrestore.utils import resolve_async_value, resolve_value

__all__ = [
    "__version__",
    "AiohttpTransport",
    "AuthFailureError",
    "Cell",
    "ClientRequestError",
    "EditModalResource",
    "EditResource",
    "EditResourceOptions",
    "EditResourceState",
    "EditStatus",
    "GatewayConfig",
    "InjectionKey",
    "ListResource",
    "ListResourceOptions",
    "ListResourceState",
    "ListStatus",
    "LoggingNotifier",
    "ModalResource",
    "MutationOptions",
    "MutationResource",
    "MutationResourceState",
    "NetworkError",
    "NotificationCategory",
    "Notifier",
    "PageData",
    "PaginationQuery",
    "RecordingNotifier",
    "RegistryKeyError",
    "RemoveResource",
    "RequestCancelledError",
    "RequestConfig",
    "RequestError",
    "RequestGateway",
    "RequestToken",
    "ResourceConfigError",
    "ResourceError",
    "ResponseEnvelope",
    "ServerError",
    "SortableQuery",
    "TokenSlot",
    "Transport",
    "TransportConnectionError",
    "TransportResponse",
    "create_list_resource",
    "inject",
    "resolve_async_value",
    "resolve_value",
    "with_injection",
]
