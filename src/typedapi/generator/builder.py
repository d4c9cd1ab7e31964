"""Build an :class:`~typedapi.client.api.ApiClient` from an OpenAPI path table.

:func:`build_client` walks ``spec["paths"]`` once, in document order, and
creates one :class:`~typedapi.client.api.Operation` per path + HTTP method.
Only the path, the method, and the ``operationId`` are read; parameter and
schema declarations are ignored.

Two entries that end up with the same operation name are not deduplicated:
the later one replaces the earlier one in the name map (both stay reachable
through ``client.paths``). Names also win over same-named client and
transport attributes, except ``paths``; see :mod:`typedapi.client.api`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, Optional

from typedapi.client.api import ApiClient, Operation
from typedapi.client.response import ResponseNormalizer, ResponseStage
from typedapi.client.validation import ResponseValidator
from typedapi.exceptions import SpecParseError
from typedapi.generator.naming import operation_name
from typedapi.models import HTTPMethod

logger = logging.getLogger(__name__)

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def iter_operations(spec: Mapping[str, Any]) -> Iterator[tuple[str, str, Mapping[str, Any]]]:
    """Yield ``(path, method, operation)`` for every operation in *spec*.

    Non-method keys of a path item (``parameters``, ``summary``, ...) and
    entries that are not mappings are skipped.

    Raises:
        SpecParseError: If *spec* has no ``paths`` mapping.
    """
    paths = spec.get("paths")
    if not isinstance(paths, Mapping):
        raise SpecParseError("Spec has no 'paths' object")

    for path, path_item in paths.items():
        if not isinstance(path_item, Mapping):
            continue
        for method, operation in path_item.items():
            if method not in _HTTP_METHODS or not isinstance(operation, Mapping):
                continue
            yield path, method, operation


def build_client(
    spec: Mapping[str, Any],
    transport: Any,
    validators: Optional[Mapping[str, Any]] = None,
) -> ApiClient:
    """Create the operations for *spec* on top of *transport*.

    Args:
        spec: A dict with a ``paths`` object, already dereferenced.
        transport: Object with ``async request(config)``; usually an
            :class:`~typedapi.client.transport.HttpTransport`.
        validators: Optional map of operation name to response validator.
            When given, one :class:`~typedapi.client.validation.ResponseValidator`
            stage is installed for the whole client.

    Returns:
        The built :class:`~typedapi.client.api.ApiClient`.

    Raises:
        SpecParseError: If *spec* has no ``paths`` object.
        TypeError: If a validator has an unsupported shape.
    """
    stages: list[ResponseStage] = []
    if validators:
        stages.append(ResponseValidator(validators))
    normalizer = ResponseNormalizer(transport, stages)

    operations: dict[str, Operation] = {}
    paths: dict[str, dict[str, Operation]] = {}

    for path, method, descriptor in iter_operations(spec):
        name = operation_name(method, path, descriptor.get("operationId"))
        operation = Operation(name, path, method, normalizer)
        previous = operations.get(name)
        if previous is not None:
            logger.debug(
                "Operation name %s for %s %s replaces %s %s",
                name, method.upper(), path, previous.method.upper(), previous.path,
            )
        operations[name] = operation
        paths.setdefault(path, {})[method] = operation

    logger.debug("Built %d operations over %d paths", len(operations), len(paths))
    return ApiClient(transport, operations, paths, normalizer)
