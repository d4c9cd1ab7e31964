"""Shared test fixtures for typedapi.

Provides sample specs, a recording fake transport, helpers for building
``httpx`` responses, and automatic reset of the global output manager.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx
import pytest

from typedapi.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the global OutputManager so streams captured by CliRunner never leak."""
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_spec() -> dict[str, Any]:
    """Minimal spec with two declared operations on one path."""
    return {
        "paths": {
            "/user/{id}": {
                "get": {"operationId": "getUser"},
                "post": {"operationId": "createUser"},
            },
        },
    }


@pytest.fixture
def store_spec() -> dict[str, Any]:
    """A fuller OpenAPI 3.0 document with derived names and non-method keys."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Store API", "version": "1.0.0"},
        "servers": [{"url": "https://store.example.com"}],
        "paths": {
            "/user/{id}": {
                "parameters": [{"name": "id", "in": "path", "required": True}],
                "get": {"operationId": "getUser"},
                "delete": {},
            },
            "/order/{id}/items/{itemId}": {
                "post": {},
            },
            "/health": {
                "summary": "Liveness",
                "get": {"operationId": "health-check"},
            },
        },
    }


# ---------------------------------------------------------------------------
# Transport fakes
# ---------------------------------------------------------------------------


def make_response(
    status_code: int = 200,
    json_data: Any = None,
    content: Optional[bytes] = None,
    headers: Optional[dict[str, str]] = None,
) -> httpx.Response:
    """Build an httpx.Response bound to a dummy request."""
    request = httpx.Request("GET", "https://api.example.com/test")
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, headers=headers, request=request)
    return httpx.Response(status_code, content=content or b"", headers=headers, request=request)


class FakeTransport:
    """Records request configs and answers them with a handler.

    The handler receives the config and returns an ``httpx.Response`` or
    raises; it may also be a coroutine function.
    """

    def __init__(self, handler: Optional[Callable[[dict[str, Any]], Any]] = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.handler = handler or (lambda config: make_response(200, {"ok": True}))
        self.closed = False
        self.interceptors = object()

    async def request(self, config: dict[str, Any]) -> httpx.Response:
        self.calls.append(config)
        result = self.handler(config)
        if hasattr(result, "__await__"):
            result = await result
        return result

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
