"""Optional per-operation validation of response payloads.

:class:`ResponseValidator` is a response stage (see
:class:`~typedapi.client.response.ResponseNormalizer`). It looks up a
validator by the ``operation_name`` recorded in the request config and runs
it on every ok result for that operation. Any exception raised by the
validator (pydantic, jsonschema, marshmallow or a custom ``parse``) turns
the result into an ``ApiErrorResponse`` with ``problem=VALIDATION_ERROR``;
a payload that passes is replaced by the validated value.

Accepted validators::

    from pydantic import BaseModel, TypeAdapter

    class User(BaseModel):
        id: int
        name: str

    validators = {
        "getUser": User,                          # BaseModel subclass
        "listUsers": TypeAdapter(list[User]),     # TypeAdapter
        "health": my_schema,                      # anything with parse(value)
        "ping": lambda value: value,              # plain callable
    }
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from pydantic import BaseModel, TypeAdapter

from typedapi.client.result import ApiErrorResponse, ApiResponse
from typedapi.models import ProblemCode

logger = logging.getLogger(__name__)

ParseFn = Callable[[Any], Any]


def as_parse_function(validator: Any) -> ParseFn:
    """Return the ``value -> value`` function behind *validator*.

    Raises:
        TypeError: If *validator* is none of the accepted shapes.
    """
    if isinstance(validator, type) and issubclass(validator, BaseModel):
        return validator.model_validate
    if isinstance(validator, TypeAdapter):
        return validator.validate_python
    parse = getattr(validator, "parse", None)
    if callable(parse):
        return parse
    if callable(validator):
        return validator
    raise TypeError(
        f"Unsupported validator {validator!r}: expected a pydantic model, "
        "a TypeAdapter, an object with parse(), or a callable"
    )


class ResponseValidator:
    """Response stage validating payloads by operation name.

    Args:
        validators: Mapping of operation name to validator.

    Raises:
        TypeError: If any validator has an unsupported shape.
    """

    def __init__(self, validators: Mapping[str, Any]) -> None:
        self._parsers = {name: as_parse_function(v) for name, v in validators.items()}

    def __contains__(self, operation_name: object) -> bool:
        return operation_name in self._parsers

    def __call__(self, result: ApiResponse) -> ApiResponse:
        if not result.ok:
            return result

        name = result.config.get("operation_name")
        parse = self._parsers.get(name)
        if parse is None:
            return result

        try:
            data = parse(result.data)
        except Exception as exc:
            logger.debug("Response of %s failed validation: %s", name, exc)
            return ApiErrorResponse(
                problem=ProblemCode.VALIDATION_ERROR,
                original_error=exc,
                status=result.status,
                data=result.data,
                headers=result.headers,
                config=result.config,
                duration=result.duration,
            )
        return replace(result, data=data)
