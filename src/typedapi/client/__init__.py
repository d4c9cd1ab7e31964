"""Request building, transport, and result normalisation.

Modules:
    :mod:`~typedapi.client.params` -- split flat parameters into path and query.
    :mod:`~typedapi.client.transport` -- :class:`HttpTransport` over httpx.
    :mod:`~typedapi.client.response` -- classify outcomes into uniform results.
    :mod:`~typedapi.client.validation` -- optional payload validation stage.
    :mod:`~typedapi.client.api` -- :class:`ApiClient` and :class:`Operation`.

Example::

    from typedapi.client import HttpTransport

    async with HttpTransport(base_url="https://api.example.com") as transport:
        response = await transport.get("/users")
"""

from typedapi.client.api import ApiClient, Operation
from typedapi.client.params import SplitParamsResult, split_params
from typedapi.client.response import ResponseNormalizer, problem_from_error, problem_from_status
from typedapi.client.result import ApiErrorResponse, ApiOkResponse, ApiResponse
from typedapi.client.transport import CancelToken, HttpTransport, RequestCancelled, TransportError
from typedapi.client.validation import ResponseValidator

__all__ = [
    "ApiClient",
    "ApiErrorResponse",
    "ApiOkResponse",
    "ApiResponse",
    "CancelToken",
    "HttpTransport",
    "Operation",
    "RequestCancelled",
    "ResponseNormalizer",
    "ResponseValidator",
    "SplitParamsResult",
    "TransportError",
    "problem_from_error",
    "problem_from_status",
    "split_params",
]
