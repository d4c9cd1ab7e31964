"""Uniform call results returned by every generated operation.

An operation never raises for API-level failures. It returns exactly one of
two frozen dataclasses, discriminated by ``ok``::

    result = await client.getUser({"id": 7})
    if result.ok:
        print(result.data["name"])
    elif result.problem is ProblemCode.CLIENT_ERROR:
        print("rejected with", result.status)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union

from typedapi.models import ProblemCode


@dataclass(frozen=True)
class ApiOkResponse:
    """A round-trip that completed with an accepted status.

    Attributes:
        data: Decoded payload; ``{}`` when the response had no body.
        status: HTTP status code.
        headers: Response headers.
        config: The request config sent to the transport.
        duration: Round-trip time in seconds.
    """

    data: Any
    status: int
    headers: dict[str, str]
    config: dict[str, Any]
    duration: Optional[float] = None
    ok: Literal[True] = True
    problem: None = None
    original_error: None = None


@dataclass(frozen=True)
class ApiErrorResponse:
    """A round-trip that failed, or whose payload failed validation.

    Attributes:
        problem: Classified failure category.
        original_error: The transport or validation error behind the failure.
        status: HTTP status code, ``None`` when the server never answered.
        data: ``{}`` for transport failures; the raw payload for
            ``VALIDATION_ERROR``.
        headers: Response headers when the server answered.
        config: The request config, when known.
        duration: Round-trip time in seconds.
    """

    problem: ProblemCode
    original_error: BaseException
    status: Optional[int] = None
    data: Any = field(default_factory=dict)
    headers: Optional[dict[str, str]] = None
    config: Optional[dict[str, Any]] = None
    duration: Optional[float] = None
    ok: Literal[False] = False


ApiResponse = Union[ApiOkResponse, ApiErrorResponse]
