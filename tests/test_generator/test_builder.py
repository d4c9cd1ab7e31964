"""Tests for typedapi.generator.builder -- client construction from a path table."""

from __future__ import annotations

import logging
from typing import Any

import pytest
from pydantic import BaseModel

from conftest import FakeTransport, make_response
from typedapi.client.api import ApiClient
from typedapi.client.validation import ResponseValidator
from typedapi.exceptions import SpecParseError
from typedapi.generator.builder import build_client, iter_operations
from typedapi.models import ProblemCode


class Health(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# iter_operations
# ---------------------------------------------------------------------------


class TestIterOperations:
    def test_document_order(self, store_spec: dict[str, Any]) -> None:
        entries = [(path, method) for path, method, _ in iter_operations(store_spec)]
        assert entries == [
            ("/user/{id}", "get"),
            ("/user/{id}", "delete"),
            ("/order/{id}/items/{itemId}", "post"),
            ("/health", "get"),
        ]

    def test_skips_non_method_keys(self) -> None:
        spec = {
            "paths": {
                "/x": {
                    "summary": "text",
                    "description": "more text",
                    "parameters": [],
                    "servers": [],
                    "x-internal": {"get": "not an operation"},
                    "trace": {},
                    "get": {},
                },
            },
        }
        assert [m for _, m, _ in iter_operations(spec)] == ["get"]

    def test_skips_non_mapping_entries(self) -> None:
        spec = {"paths": {"/a": None, "/b": {"get": "broken", "post": {}}}}
        assert [(p, m) for p, m, _ in iter_operations(spec)] == [("/b", "post")]

    def test_missing_paths(self) -> None:
        with pytest.raises(SpecParseError, match="paths"):
            list(iter_operations({"openapi": "3.0.0"}))

    def test_paths_not_a_mapping(self) -> None:
        with pytest.raises(SpecParseError):
            list(iter_operations({"paths": ["/a", "/b"]}))


# ---------------------------------------------------------------------------
# build_client
# ---------------------------------------------------------------------------


class TestBuildClient:
    def test_operation_names(self, store_spec: dict[str, Any], fake_transport: FakeTransport) -> None:
        client = build_client(store_spec, fake_transport)
        assert list(client) == ["getUser", "deleteUserId", "postOrderIdItemsItemId", "health_check"]
        assert isinstance(client, ApiClient)

    def test_paths_view(self, store_spec: dict[str, Any], fake_transport: FakeTransport) -> None:
        client = build_client(store_spec, fake_transport)
        assert list(client.paths) == ["/user/{id}", "/order/{id}/items/{itemId}", "/health"]
        assert list(client.paths["/user/{id}"]) == ["get", "delete"]
        assert client.paths["/health"]["get"].name == "health_check"

    def test_empty_paths(self, fake_transport: FakeTransport) -> None:
        client = build_client({"paths": {}}, fake_transport)
        assert len(client) == 0
        assert dict(client.paths) == {}

    def test_declared_name_collision_keeps_last(self, fake_transport: FakeTransport, caplog) -> None:
        spec = {
            "paths": {
                "/a": {"get": {"operationId": "dup"}},
                "/b": {"get": {"operationId": "dup"}},
            },
        }
        with caplog.at_level(logging.DEBUG, logger="typedapi.generator.builder"):
            client = build_client(spec, fake_transport)

        assert client.dup.path == "/b"
        assert len(client) == 1
        assert client.paths["/a"]["get"].path == "/a"
        assert client.paths["/b"]["get"] is client.dup
        assert "replaces" in caplog.text

    def test_derived_name_collision_keeps_last(self, fake_transport: FakeTransport) -> None:
        spec = {"paths": {"/user/{id}": {"get": {}}, "/user-id": {"get": {}}}}
        client = build_client(spec, fake_transport)
        assert client.getUserId.path == "/user-id"

    def test_building_twice_is_deterministic(self, store_spec: dict[str, Any]) -> None:
        first = build_client(store_spec, FakeTransport())
        second = build_client(store_spec, FakeTransport())
        assert list(first) == list(second)
        assert [(op.path, op.method) for op in first.operations.values()] == [
            (op.path, op.method) for op in second.operations.values()
        ]

    def test_spec_is_not_mutated(self, store_spec: dict[str, Any], fake_transport: FakeTransport) -> None:
        before = repr(store_spec)
        build_client(store_spec, fake_transport)
        assert repr(store_spec) == before

    def test_no_validators_no_stages(self, store_spec: dict[str, Any], fake_transport: FakeTransport) -> None:
        assert build_client(store_spec, fake_transport).stages == ()

    def test_validators_install_one_stage(self, store_spec: dict[str, Any], fake_transport: FakeTransport) -> None:
        client = build_client(store_spec, fake_transport, validators={"health_check": Health})
        assert len(client.stages) == 1
        assert isinstance(client.stages[0], ResponseValidator)

    def test_invalid_validator_rejected(self, store_spec: dict[str, Any], fake_transport: FakeTransport) -> None:
        with pytest.raises(TypeError):
            build_client(store_spec, fake_transport, validators={"health_check": 3})

    async def test_validator_applies_only_to_its_operation(self, store_spec: dict[str, Any]) -> None:
        transport = FakeTransport(lambda config: make_response(200, {"unexpected": True}))
        client = build_client(store_spec, transport, validators={"health_check": Health})

        health = await client.health_check()
        user = await client.getUser({"id": 1})

        assert health.problem is ProblemCode.VALIDATION_ERROR
        assert health.data == {"unexpected": True}
        assert user.ok is True

    async def test_validated_payload_replaces_data(self, store_spec: dict[str, Any]) -> None:
        transport = FakeTransport(lambda config: make_response(200, {"status": "up"}))
        client = build_client(store_spec, transport, validators={"health_check": Health})

        result = await client.health_check()

        assert result.ok is True
        assert result.data == Health(status="up")
