"""Request gateway: merge config, call the transport, unwrap, classify errors."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp
from pydantic import ValidationError

from pyrestore._constants import (
    HTTP_UNAUTHORIZED,
    MSG_MALFORMED_RESPONSE,
    MSG_NETWORK_ERROR,
    MSG_REQUEST_CANCELLED,
    MSG_SERVER_BUSY,
    MSG_SESSION_EXPIRED,
)
from pyrestore._redact import redact_for_log
from pyrestore._token import RequestToken
from pyrestore._transport import AiohttpTransport, Transport, TransportResponse
from pyrestore.config import GatewayConfig
from pyrestore.exceptions import (
    AuthFailureError,
    ClientRequestError,
    NetworkError,
    RequestCancelledError,
    RequestError,
    ServerError,
    TransportConnectionError,
)
from pyrestore.models.envelope import ResponseEnvelope
from pyrestore.models.request import RequestConfig, config_fields
from pyrestore.notify import LoggingNotifier, NotificationCategory, Notifier

_logger = logging.getLogger(__name__)

RequestLike = RequestConfig | Mapping[str, Any]


def _envelope_field(payload: Any, name: str) -> Any:
    if isinstance(payload, Mapping):
        return payload.get(name)
    return None


class RequestGateway:
    """Single entry point for every request issued by a resource.

    Usage::

        async with RequestGateway(GatewayConfig(base_url="https://example.org/api")) as gateway:
            users = await gateway.get("/users", {"page": 0, "size": 20})

    Subclasses customise behaviour through the hook methods
    :meth:`get_request_config`, :meth:`normalize_response` and
    :meth:`on_auth_failed`.
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        *,
        transport: Transport | None = None,
        notifier: Notifier | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or GatewayConfig()
        self._transport = transport
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._http_session = session
        self._owns_session = False

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RequestGateway:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
                self._owns_session = True
            self._transport = AiohttpTransport(self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._owns_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None
        self._owns_session = False

    # ------------------------------------------------------------------
    # Public request API
    # ------------------------------------------------------------------

    async def request(self, config: RequestLike, *, token: RequestToken | None = None) -> Any:
        """Send a request and return the unwrapped envelope ``data``.

        Raises
        ------
        RequestCancelledError
            *token* was aborted before or during the call.
        AuthFailureError, ServerError, NetworkError, ClientRequestError
            Classified failures; already reported when raised.
        """
        try:
            return await self._perform(config, token)
        except RequestError as error:
            self.request_error_handler(error)
            raise

    async def get(
        self,
        url: str,
        query: Mapping[str, Any] | None = None,
        *,
        config: RequestLike | None = None,
        token: RequestToken | None = None,
    ) -> Any:
        base = {"method": "GET", "url": url, "params": dict(query) if query is not None else None}
        return await self.request({**base, **config_fields(config)}, token=token)

    async def post(
        self,
        url: str,
        data: Any = None,
        *,
        config: RequestLike | None = None,
        token: RequestToken | None = None,
    ) -> Any:
        base = {"method": "POST", "url": url, "data": data}
        return await self.request({**base, **config_fields(config)}, token=token)

    async def put(
        self,
        url: str,
        data: Any = None,
        *,
        config: RequestLike | None = None,
        token: RequestToken | None = None,
    ) -> Any:
        base = {"method": "PUT", "url": url, "data": data}
        return await self.request({**base, **config_fields(config)}, token=token)

    async def delete(
        self,
        url: str,
        query: Mapping[str, Any] | None = None,
        *,
        config: RequestLike | None = None,
        token: RequestToken | None = None,
    ) -> Any:
        base = {"method": "DELETE", "url": url, "params": dict(query) if query is not None else None}
        return await self.request({**base, **config_fields(config)}, token=token)

    # ------------------------------------------------------------------
    # Overridable hooks
    # ------------------------------------------------------------------

    def get_request_config(self, config: RequestLike) -> RequestConfig:
        """Merge gateway defaults and the caller's request config.

        Caller fields win on conflict; headers are merged per key.
        """
        request = config if isinstance(config, RequestConfig) else RequestConfig.model_validate(dict(config))
        defaults = RequestConfig(
            headers={
                "Accept": "application/json",
                "User-Agent": self._config.user_agent,
                **self._config.headers,
            },
            timeout=self._config.timeout,
        )
        merged = defaults.merged(request)
        return merged.model_copy(update={"url": self._join_url(merged.url)})

    def normalize_response(self, payload: Any) -> ResponseEnvelope[Any]:
        """Convert a raw body into the standard envelope.

        The default expects the server to already speak ``{code, message, data}``.
        Override for servers with a different envelope.
        """
        if isinstance(payload, ResponseEnvelope):
            return payload
        if payload is None:
            # Empty body (e.g. 204 No Content)
            return ResponseEnvelope[Any](code=0)
        return ResponseEnvelope[Any].model_validate(payload)

    def unwrap_response(self, envelope: ResponseEnvelope[Any]) -> Any:
        return envelope.data

    def on_auth_failed(self, error: AuthFailureError) -> None:
        """Called once per HTTP 401.

        The default just tells the user the session expired. Override to
        trigger re-authentication or a redirect; the override then owns
        user-facing reporting.
        """
        self._notifier.notify(NotificationCategory.WARNING, error.message)

    def request_error_handler(self, error: RequestError) -> None:
        """Report a classified failure exactly once and mark it handled."""
        if error.handled:
            return
        error.handled = True

        if isinstance(error, RequestCancelledError):
            _logger.debug("Request to %s cancelled", error.url)
            return

        if isinstance(error, AuthFailureError):
            _logger.debug("Request to %s rejected: session expired", error.url)
            self.on_auth_failed(error)
            return

        _logger.debug("Request to %s failed: %s", error.url, error, exc_info=error)
        self._notifier.notify(NotificationCategory.ERROR, error.message)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _join_url(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        base = self._config.base_url.rstrip("/")
        if not url:
            return base
        return f"{base}/{url.lstrip('/')}"

    async def _perform(self, config: RequestLike, token: RequestToken | None) -> Any:
        if token is not None and token.aborted:
            raise RequestCancelledError(MSG_REQUEST_CANCELLED)

        try:
            merged = self.get_request_config(config)
        except (ValidationError, ValueError, TypeError) as exc:
            raise ClientRequestError(str(exc)) from exc

        if self._config.trace_enabled:
            _logger.debug("Request config %s", redact_for_log(merged))

        response = await self._dispatch(merged, token)
        return self._handle_response(merged, response)

    async def _dispatch(self, request: RequestConfig, token: RequestToken | None) -> TransportResponse:
        transport = self._transport
        if transport is None:
            raise ClientRequestError(
                "Gateway not initialized. Use 'async with RequestGateway(...) as gateway:'",
                url=request.url,
            )

        task = asyncio.ensure_future(transport.send(request))
        remove_abort = token.on_abort(task.cancel) if token is not None else None
        try:
            response = await task
        except asyncio.CancelledError:
            if token is not None and token.aborted:
                raise RequestCancelledError(MSG_REQUEST_CANCELLED, url=request.url) from None
            raise
        except Exception as exc:
            if token is not None and token.aborted:
                raise RequestCancelledError(MSG_REQUEST_CANCELLED, url=request.url) from exc
            if isinstance(exc, TransportConnectionError):
                raise NetworkError(MSG_NETWORK_ERROR, url=request.url) from exc
            if isinstance(exc, RequestError):
                raise
            # Anything else the transport raises happened while building the
            # request (invalid URL, unserialisable body).
            raise ClientRequestError(str(exc) or type(exc).__name__, url=request.url) from exc
        finally:
            if remove_abort is not None:
                remove_abort()

        if token is not None and token.aborted:
            # The transport settled before the abort could cancel it.
            raise RequestCancelledError(MSG_REQUEST_CANCELLED, url=request.url)
        return response

    def _handle_response(self, request: RequestConfig, response: TransportResponse) -> Any:
        if response.status == HTTP_UNAUTHORIZED:
            raise AuthFailureError(
                MSG_SESSION_EXPIRED,
                status_code=response.status,
                url=request.url,
                payload=response.payload,
            )

        if not response.ok:
            message = _envelope_field(response.payload, "message")
            code = _envelope_field(response.payload, "code")
            raise ServerError(
                str(message) if message else MSG_SERVER_BUSY,
                status_code=response.status,
                url=request.url,
                payload=response.payload,
                code=code if isinstance(code, int) else None,
            )

        try:
            envelope = self.normalize_response(response.payload)
        except ValidationError as exc:
            raise ServerError(
                MSG_MALFORMED_RESPONSE,
                status_code=response.status,
                url=request.url,
                payload=response.payload,
            ) from exc

        return self.unwrap_response(envelope)
