"""typedapi -- call OpenAPI operations through a generated async client.

A client is built from the ``paths`` table of an OpenAPI document: every
path + HTTP method becomes one awaitable operation, named after its
``operationId`` or derived from the method and path. Each call takes one
flat parameter dict (path placeholders are filled from it, the rest become
query parameters) and returns a uniform result instead of raising on API
failures::

    from typedapi import ApiConfig, create_typed_api

    client = await create_typed_api("openapi.yaml", ApiConfig(base_url="https://api.example.com"))
    result = await client.getUser({"id": 7, "expand": "details"})
    if result.ok:
        print(result.data)
    else:
        print(result.problem, result.status)

Modules:
    client: Transport, parameter splitting, result normalisation.
    generator: Operation naming and client building.
    parser: Spec loading and ``$ref`` resolution.
    factory: :func:`create_typed_api` facade.
    models: Pydantic configuration model and enums.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer command line.
"""

__version__ = "0.1.0"

from typedapi.client import (  # noqa: E402
    ApiClient,
    ApiErrorResponse,
    ApiOkResponse,
    ApiResponse,
    CancelToken,
    HttpTransport,
    Operation,
    TransportError,
    split_params,
)
from typedapi.factory import create_typed_api  # noqa: E402
from typedapi.generator import build_client, operation_name  # noqa: E402
from typedapi.models import ApiConfig, ProblemCode  # noqa: E402

__all__ = [
    "ApiClient",
    "ApiConfig",
    "ApiErrorResponse",
    "ApiOkResponse",
    "ApiResponse",
    "CancelToken",
    "HttpTransport",
    "Operation",
    "ProblemCode",
    "TransportError",
    "build_client",
    "create_typed_api",
    "operation_name",
    "split_params",
]
