"""Normalise transport outcomes into :mod:`typedapi.client.result` values.

:class:`ResponseNormalizer` wraps one transport round-trip. Success becomes
an :class:`~typedapi.client.result.ApiOkResponse`; every
:class:`~typedapi.client.transport.TransportError` becomes an
:class:`~typedapi.client.result.ApiErrorResponse` with a
:class:`~typedapi.models.ProblemCode`. Other exceptions are not transport
failures and propagate unchanged.

Classification uses two rules:

* :func:`problem_from_status` when the server answered with a status;
* :func:`problem_from_error` when it did not (network, timeout, cancel).

After classification the result passes through the client's ordered
response stages (for example
:class:`~typedapi.client.validation.ResponseValidator`).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any, Optional

import httpx

from typedapi.client.result import ApiErrorResponse, ApiOkResponse, ApiResponse
from typedapi.client.transport import NETWORK_ERROR_MESSAGE, TransportError, is_cancel
from typedapi.models import ProblemCode

logger = logging.getLogger(__name__)

ResponseStage = Callable[[ApiResponse], ApiResponse]

TIMEOUT_CODES = frozenset({"ECONNABORTED", "ETIMEDOUT"})
CONNECTION_CODES = frozenset({"ECONNREFUSED", "ENOTFOUND", "EHOSTUNREACH"})


def problem_from_status(status: Optional[int]) -> Optional[ProblemCode]:
    """Classify an HTTP status.

    ``None`` for 2xx; ``CLIENT_ERROR`` for 4xx; ``SERVER_ERROR`` for 5xx and
    above; ``UNKNOWN_ERROR`` for a missing status and everything else.
    """
    if not status:
        return ProblemCode.UNKNOWN_ERROR
    if 200 <= status < 300:
        return None
    if 400 <= status < 500:
        return ProblemCode.CLIENT_ERROR
    if status >= 500:
        return ProblemCode.SERVER_ERROR
    return ProblemCode.UNKNOWN_ERROR


def problem_from_error(error: TransportError) -> Optional[ProblemCode]:
    """Classify a transport failure that has no usable response.

    Checked in order: generic network failure, cancellation, missing error
    code (falls back to :func:`problem_from_status`), timeout codes,
    connection codes, and finally ``UNKNOWN_ERROR``.
    """
    if error.message == NETWORK_ERROR_MESSAGE:
        return ProblemCode.NETWORK_ERROR
    if is_cancel(error):
        return ProblemCode.CANCEL_ERROR
    if not error.code:
        return problem_from_status(error.status)
    if error.code in TIMEOUT_CODES:
        return ProblemCode.TIMEOUT_ERROR
    if error.code in CONNECTION_CODES:
        return ProblemCode.CONNECTION_ERROR
    return ProblemCode.UNKNOWN_ERROR


def extract_response_data(response: httpx.Response) -> Any:
    """Decode the body of *response*.

    JSON when it parses, otherwise the raw text; ``None`` for an empty body.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def ok_result(response: httpx.Response, config: dict[str, Any]) -> ApiOkResponse:
    """Build the ok variant from a successful transport *response*."""
    data = extract_response_data(response)
    return ApiOkResponse(
        data={} if data is None else data,
        status=response.status_code,
        headers=dict(response.headers),
        config=config,
    )


def error_result(error: TransportError) -> ApiErrorResponse:
    """Build the failure variant from a :class:`TransportError`."""
    response = error.response
    if response is not None:
        problem = problem_from_status(response.status_code)
        headers: Optional[dict[str, str]] = dict(response.headers)
    else:
        problem = problem_from_error(error)
        headers = None
    return ApiErrorResponse(
        problem=problem or ProblemCode.UNKNOWN_ERROR,
        original_error=error,
        status=error.status,
        data={},
        headers=headers,
        config=error.config,
    )


class ResponseNormalizer:
    """Run one request through a transport and return a uniform result.

    Args:
        transport: Any object with an ``async request(config)`` method
            returning an :class:`httpx.Response` and raising
            :class:`TransportError` on failure.
        stages: Response stages applied, in order, to every result.
    """

    def __init__(self, transport: Any, stages: Sequence[ResponseStage] = ()) -> None:
        self._transport = transport
        self._stages = tuple(stages)

    @property
    def stages(self) -> tuple[ResponseStage, ...]:
        return self._stages

    async def __call__(self, config: dict[str, Any]) -> ApiResponse:
        started = time.perf_counter()
        try:
            response = await self._transport.request(config)
        except TransportError as exc:
            result: ApiResponse = error_result(exc)
            if result.config is None:
                result = replace(result, config=config)
            logger.debug(
                "%s %s -> %s (%s)",
                config.get("method"), config.get("url"), result.problem.value, exc.message,
            )
        else:
            result = ok_result(response, config)

        result = replace(result, duration=time.perf_counter() - started)
        for stage in self._stages:
            result = stage(result)
        return result

