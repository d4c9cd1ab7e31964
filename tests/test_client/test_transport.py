"""Tests for typedapi.client.transport -- HttpTransport over httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json
from typing import Callable

import httpx
import pytest

from typedapi.client.transport import (
    ECONNABORTED,
    ECONNREFUSED,
    ERR_BAD_REQUEST,
    ERR_BAD_RESPONSE,
    ERR_CANCELED,
    ERR_NETWORK,
    ERR_TRANSPORT,
    NETWORK_ERROR_MESSAGE,
    CancelToken,
    HttpTransport,
    InterceptorManager,
    RequestCancelled,
    TransportError,
    is_cancel,
)
from typedapi.models import ApiConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_transport(handler: Callable) -> HttpTransport:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="https://api.example.com",
    )
    return HttpTransport(base_url="https://api.example.com", timeout=5.0, client=client)


def _echo(request: httpx.Request) -> httpx.Response:
    body = request.content.decode() if request.content else None
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "path": request.url.path,
            "query": dict(request.url.params),
            "body": body,
            "content_type": request.headers.get("content-type"),
            "x_custom": request.headers.get("x-custom"),
        },
    )


# ---------------------------------------------------------------------------
# Successful requests
# ---------------------------------------------------------------------------


class TestRequest:
    async def test_get_with_query(self) -> None:
        async with _make_transport(_echo) as transport:
            response = await transport.request(
                {"method": "get", "url": "/users", "params": {"page": "2"}}
            )
        payload = response.json()
        assert payload["method"] == "GET"
        assert payload["path"] == "/users"
        assert payload["query"] == {"page": "2"}

    async def test_empty_params_send_no_query_string(self) -> None:
        async with _make_transport(_echo) as transport:
            response = await transport.request({"method": "get", "url": "/users", "params": {}})
        assert response.json()["query"] == {}

    async def test_dict_body_is_json(self) -> None:
        async with _make_transport(_echo) as transport:
            response = await transport.post("/users", data={"name": "Ada"})
        payload = response.json()
        assert payload["method"] == "POST"
        assert json.loads(payload["body"]) == {"name": "Ada"}
        assert payload["content_type"] == "application/json"

    async def test_string_body_is_raw(self) -> None:
        async with _make_transport(_echo) as transport:
            response = await transport.put("/notes/1", data="hello")
        assert response.json()["body"] == "hello"

    async def test_per_request_headers(self) -> None:
        async with _make_transport(_echo) as transport:
            response = await transport.get("/x", headers={"X-Custom": "yes"})
        assert response.json()["x_custom"] == "yes"

    @pytest.mark.parametrize("method", ["delete", "head", "options", "patch"])
    async def test_convenience_methods(self, method: str) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.method)
            return httpx.Response(204)

        async with _make_transport(handler) as transport:
            await getattr(transport, method)("/thing")
        assert seen == [method.upper()]

    def test_from_config(self) -> None:
        config = ApiConfig(base_url="https://api.test", timeout=3.0, headers={"X-Key": "k"})
        transport = HttpTransport.from_config(config)
        assert transport.base_url == "https://api.test"
        assert transport.timeout == 3.0


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


class TestErrorMapping:
    async def test_4xx_is_bad_request(self) -> None:
        async with _make_transport(lambda r: httpx.Response(404, json={"m": "missing"})) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.get("/missing")
        error = exc_info.value
        assert error.code == ERR_BAD_REQUEST
        assert error.status == 404
        assert error.message == "Request failed with status code 404"
        assert error.response is not None
        assert error.config["url"] == "/missing"

    async def test_5xx_is_bad_response(self) -> None:
        async with _make_transport(lambda r: httpx.Response(503)) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.get("/down")
        assert exc_info.value.code == ERR_BAD_RESPONSE
        assert exc_info.value.status == 503

    async def test_custom_validate_status(self) -> None:
        async with _make_transport(lambda r: httpx.Response(404)) as transport:
            response = await transport.get("/missing", validate_status=lambda status: status < 500)
        assert response.status_code == 404

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        async with _make_transport(handler) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.get("/slow")
        assert exc_info.value.code == ECONNABORTED
        assert exc_info.value.status is None
        assert "timeout" in exc_info.value.message

    async def test_connect_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _make_transport(handler) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.get("/x")
        assert exc_info.value.code == ECONNREFUSED

    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadError("connection reset", request=request)

        async with _make_transport(handler) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.get("/x")
        assert exc_info.value.code == ERR_NETWORK
        assert exc_info.value.message == NETWORK_ERROR_MESSAGE

    async def test_other_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("malformed", request=request)

        async with _make_transport(handler) as transport:
            with pytest.raises(TransportError) as exc_info:
                await transport.get("/x")
        assert exc_info.value.code == ERR_TRANSPORT

    async def test_unrelated_errors_propagate(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise ValueError("handler bug")

        async with _make_transport(handler) as transport:
            with pytest.raises(ValueError, match="handler bug"):
                await transport.get("/x")


# ---------------------------------------------------------------------------
# Interceptors
# ---------------------------------------------------------------------------


class TestInterceptorManager:
    def test_use_returns_stable_ids(self) -> None:
        manager = InterceptorManager()
        first = manager.use(lambda c: c)
        second = manager.use(lambda c: c)
        manager.eject(first)
        assert second == 1
        assert len(manager) == 1

    def test_eject_unknown_id_is_noop(self) -> None:
        manager = InterceptorManager()
        manager.use(lambda c: c)
        manager.eject(99)
        assert len(manager) == 1

    def test_clear(self) -> None:
        manager = InterceptorManager()
        manager.use(lambda c: c)
        manager.clear()
        assert list(manager) == []


class TestInterceptors:
    async def test_request_interceptor_rewrites_config(self) -> None:
        async with _make_transport(_echo) as transport:
            transport.interceptors.request.use(
                lambda config: {**config, "headers": {"X-Custom": "intercepted"}}
            )
            response = await transport.get("/x")
        assert response.json()["x_custom"] == "intercepted"

    async def test_async_request_interceptor(self) -> None:
        async def add_param(config):
            return {**config, "params": {"from": "interceptor"}}

        async with _make_transport(_echo) as transport:
            transport.interceptors.request.use(add_param)
            response = await transport.get("/x")
        assert response.json()["query"] == {"from": "interceptor"}

    async def test_response_interceptor_sees_response(self) -> None:
        statuses: list[int] = []

        def record(response):
            statuses.append(response.status_code)
            return response

        async with _make_transport(_echo) as transport:
            transport.interceptors.response.use(record)
            await transport.get("/x")
        assert statuses == [200]

    async def test_rejected_handler_can_recover(self) -> None:
        fallback = httpx.Response(200, json={"cached": True})

        async with _make_transport(lambda r: httpx.Response(500)) as transport:
            transport.interceptors.response.use(None, lambda error: fallback)
            response = await transport.get("/x")
        assert response is fallback

    async def test_rejected_handler_can_rethrow(self) -> None:
        def rethrow(error):
            raise TransportError("rewrapped", code="ECUSTOM", config=error.config)

        async with _make_transport(lambda r: httpx.Response(500)) as transport:
            transport.interceptors.response.use(None, rethrow)
            with pytest.raises(TransportError) as exc_info:
                await transport.get("/x")
        assert exc_info.value.code == "ECUSTOM"

    async def test_ejected_interceptor_does_not_run(self) -> None:
        calls: list[str] = []

        def record(config):
            calls.append("ran")
            return config

        async with _make_transport(_echo) as transport:
            handler_id = transport.interceptors.request.use(record)
            transport.interceptors.request.eject(handler_id)
            await transport.get("/x")
        assert calls == []


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


class TestCancellation:
    async def test_already_cancelled_token(self) -> None:
        token = CancelToken()
        token.cancel("stop")

        async with _make_transport(_echo) as transport:
            with pytest.raises(RequestCancelled) as exc_info:
                await transport.get("/x", cancel_token=token)
        assert exc_info.value.code == ERR_CANCELED
        assert exc_info.value.message == "stop"
        assert is_cancel(exc_info.value)

    async def test_cancel_in_flight(self) -> None:
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200)

        token = CancelToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel, "user abort")

        async with _make_transport(slow) as transport:
            with pytest.raises(RequestCancelled, match="user abort"):
                await transport.get("/slow", cancel_token=token)
        assert token.cancelled

    async def test_unused_token_lets_request_finish(self) -> None:
        token = CancelToken()
        async with _make_transport(_echo) as transport:
            response = await transport.get("/x", cancel_token=token)
        assert response.status_code == 200
        assert not token.cancelled

    def test_cancel_keeps_first_reason(self) -> None:
        token = CancelToken()
        token.cancel("first")
        token.cancel("second")
        assert token.reason == "first"

    def test_plain_transport_error_is_not_cancel(self) -> None:
        assert not is_cancel(TransportError("x"))
