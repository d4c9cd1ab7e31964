"""Asynchronous HTTP transport backed by :class:`httpx.AsyncClient`.

:class:`HttpTransport` is the default executor behind every generated
operation. It takes one *request config* dict per call::

    {
        "method": "get",
        "url": "/user/1",
        "params": {"expand": "details"},
        "data": None,
        "operation_name": "getUser",
        # optional: "headers", "timeout", "cancel_token", "validate_status"
    }

and either returns the :class:`httpx.Response` or raises a
:class:`TransportError`. Every failure that belongs to the HTTP exchange
itself -- a status rejected by ``validate_status``, a timeout, a refused
connection, a dropped socket, a cancelled request -- is mapped onto
:class:`TransportError` with an axios-style ``code``, so that
:mod:`typedapi.client.response` can classify it without knowing about
httpx. Anything else (bad arguments, programming errors) propagates as-is.

The transport also carries request/response interceptor managers. They are
the transport's own extension point; the generated client never mutates
them.

Example::

    async with HttpTransport(base_url="https://api.example.com") as transport:
        response = await transport.get("/users", params={"page": 2})
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any, Optional

import httpx

from typedapi.models import ApiConfig

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network Error"

ERR_BAD_REQUEST = "ERR_BAD_REQUEST"
ERR_BAD_RESPONSE = "ERR_BAD_RESPONSE"
ERR_CANCELED = "ERR_CANCELED"
ERR_NETWORK = "ERR_NETWORK"
ERR_TRANSPORT = "ERR_TRANSPORT"
ECONNABORTED = "ECONNABORTED"
ECONNREFUSED = "ECONNREFUSED"


class TransportError(Exception):
    """A failed HTTP exchange.

    Attributes:
        message: Human-readable description (``"Network Error"`` for generic
            network failures).
        code: Machine-readable error code, or ``None``.
        config: The request config that produced the failure.
        response: The :class:`httpx.Response` when the server answered.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        config: Optional[dict[str, Any]] = None,
        response: Optional[httpx.Response] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.config = config
        self.response = response

    @property
    def status(self) -> Optional[int]:
        """HTTP status of the answered request, ``None`` if there was no answer."""
        return self.response.status_code if self.response is not None else None


class RequestCancelled(TransportError):
    """Raised when a request's :class:`CancelToken` fires before it completes."""

    def __init__(self, message: str = "canceled", config: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message, code=ERR_CANCELED, config=config)


def is_cancel(error: BaseException) -> bool:
    """Return ``True`` when *error* reports a request cancelled through a token."""
    return isinstance(error, RequestCancelled)


class CancelToken:
    """Cancellation handle for one or more in-flight requests.

    Pass it as ``cancel_token`` in a request config; calling :meth:`cancel`
    aborts every request still waiting on it with :class:`RequestCancelled`.
    Must be created and used inside the same event loop.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "canceled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class InterceptorManager:
    """Ordered registry of ``(on_fulfilled, on_rejected)`` handler pairs.

    Handlers may be plain functions or coroutine functions. Ids returned by
    :meth:`use` stay valid after other handlers are ejected.
    """

    def __init__(self) -> None:
        self._handlers: list[Optional[tuple[Optional[Callable], Optional[Callable]]]] = []

    def use(
        self,
        on_fulfilled: Optional[Callable] = None,
        on_rejected: Optional[Callable] = None,
    ) -> int:
        self._handlers.append((on_fulfilled, on_rejected))
        return len(self._handlers) - 1

    def eject(self, handler_id: int) -> None:
        if 0 <= handler_id < len(self._handlers):
            self._handlers[handler_id] = None

    def clear(self) -> None:
        self._handlers = []

    def __iter__(self):
        return (h for h in self._handlers if h is not None)

    def __len__(self) -> int:
        return sum(1 for _ in self)


class Interceptors:
    """The ``request`` and ``response`` interceptor managers of a transport."""

    def __init__(self) -> None:
        self.request = InterceptorManager()
        self.response = InterceptorManager()


def default_validate_status(status: int) -> bool:
    return 200 <= status < 300


class HttpTransport:
    """Asynchronous request executor used by generated clients.

    Args:
        base_url: Prefix for every relative request URL.
        timeout: Default timeout in seconds (``None`` disables it).
        headers: Headers sent with every request.
        verify_ssl: Verify SSL certificates.
        follow_redirects: Follow HTTP redirects.
        client: A pre-built :class:`httpx.AsyncClient` to use instead of
            creating one (tests inject one backed by
            :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: Optional[float] = 30.0,
        headers: Optional[dict[str, str]] = None,
        verify_ssl: bool = True,
        follow_redirects: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.interceptors = Interceptors()
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            verify=verify_ssl,
            follow_redirects=follow_redirects,
        )

    @classmethod
    def from_config(cls, config: ApiConfig) -> HttpTransport:
        """Create a transport from an :class:`~typedapi.models.ApiConfig`."""
        return cls(
            base_url=config.base_url,
            timeout=config.timeout,
            headers=config.headers,
            verify_ssl=config.verify_ssl,
            follow_redirects=config.follow_redirects,
        )

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def request(self, config: dict[str, Any]) -> httpx.Response:
        """Execute one request described by *config*.

        Request interceptors run first, in registration order, and may
        replace the config. Response interceptors then see either the
        response (``on_fulfilled``) or the :class:`TransportError`
        (``on_rejected``); a rejected handler that returns a value recovers
        the call.

        Returns:
            The :class:`httpx.Response` (after response interceptors).

        Raises:
            TransportError: The exchange failed and no interceptor recovered it.
        """
        for on_fulfilled, _ in self.interceptors.request:
            if on_fulfilled is not None:
                config = await _resolve(on_fulfilled(config))

        error: Optional[TransportError] = None
        response: Any = None
        try:
            response = await self._send(config)
        except TransportError as exc:
            error = exc

        for on_fulfilled, on_rejected in self.interceptors.response:
            handler = on_fulfilled if error is None else on_rejected
            if handler is None:
                continue
            try:
                response = await _resolve(handler(response if error is None else error))
                error = None
            except TransportError as exc:
                error = exc

        if error is not None:
            raise error
        return response

    async def get(self, url: str, **config: Any) -> httpx.Response:
        return await self.request({**config, "method": "get", "url": url})

    async def post(self, url: str, data: Any = None, **config: Any) -> httpx.Response:
        return await self.request({**config, "method": "post", "url": url, "data": data})

    async def put(self, url: str, data: Any = None, **config: Any) -> httpx.Response:
        return await self.request({**config, "method": "put", "url": url, "data": data})

    async def patch(self, url: str, data: Any = None, **config: Any) -> httpx.Response:
        return await self.request({**config, "method": "patch", "url": url, "data": data})

    async def delete(self, url: str, **config: Any) -> httpx.Response:
        return await self.request({**config, "method": "delete", "url": url})

    async def head(self, url: str, **config: Any) -> httpx.Response:
        return await self.request({**config, "method": "head", "url": url})

    async def options(self, url: str, **config: Any) -> httpx.Response:
        return await self.request({**config, "method": "options", "url": url})

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _send(self, config: dict[str, Any]) -> httpx.Response:
        """Send *config* through httpx and map failures onto :class:`TransportError`."""
        method = str(config.get("method", "get")).upper()
        url = config["url"]
        kwargs: dict[str, Any] = {
            "params": config.get("params") or None,
            "headers": config.get("headers"),
        }
        if "timeout" in config:
            kwargs["timeout"] = config["timeout"]

        data = config.get("data")
        if isinstance(data, (bytes, str)):
            kwargs["content"] = data
        elif data is not None:
            kwargs["json"] = data

        logger.debug("%s %s", method, url)
        token: Optional[CancelToken] = config.get("cancel_token")
        try:
            if token is None:
                response = await self._client.request(method, url, **kwargs)
            else:
                response = await self._send_cancellable(method, url, kwargs, token, config)
        except httpx.TimeoutException as exc:
            timeout = config.get("timeout", self.timeout)
            raise TransportError(
                f"timeout of {timeout}s exceeded", code=ECONNABORTED, config=config
            ) from exc
        except httpx.ConnectError as exc:
            raise TransportError(str(exc) or "connection failed", code=ECONNREFUSED, config=config) from exc
        except httpx.NetworkError as exc:
            raise TransportError(NETWORK_ERROR_MESSAGE, code=ERR_NETWORK, config=config) from exc
        except httpx.TransportError as exc:
            raise TransportError(str(exc) or type(exc).__name__, code=ERR_TRANSPORT, config=config) from exc

        validate_status = config.get("validate_status") or default_validate_status
        if not validate_status(response.status_code):
            status = response.status_code
            logger.debug("%s %s failed with status %d", method, url, status)
            raise TransportError(
                f"Request failed with status code {status}",
                code=ERR_BAD_REQUEST if 400 <= status < 500 else ERR_BAD_RESPONSE,
                config=config,
                response=response,
            )
        return response

    async def _send_cancellable(
        self,
        method: str,
        url: str,
        kwargs: dict[str, Any],
        token: CancelToken,
        config: dict[str, Any],
    ) -> httpx.Response:
        """Race the request against *token*; the request wins a tie."""
        if token.cancelled:
            raise RequestCancelled(token.reason or "canceled", config=config)

        request_task = asyncio.ensure_future(self._client.request(method, url, **kwargs))
        cancel_task = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (request_task, cancel_task):
                if not task.done():
                    task.cancel()

        if request_task in done:
            return request_task.result()
        logger.debug("%s %s cancelled: %s", method, url, token.reason)
        raise RequestCancelled(token.reason or "canceled", config=config)


async def _resolve(value: Any) -> Any:
    """Await *value* if an interceptor returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value
