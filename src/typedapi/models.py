"""Canonical models shared across typedapi modules.

**Configuration model** -- :class:`ApiConfig`, the settings used to build the
default :class:`~typedapi.client.transport.HttpTransport`.

**Enumerations** -- :class:`HTTPMethod`, the method tokens recognised inside
an OpenAPI path item, and :class:`ProblemCode`, the closed set of failure
categories attached to a failed call result.

The result types themselves (:class:`~typedapi.client.result.ApiOkResponse`
and :class:`~typedapi.client.result.ApiErrorResponse`) live in
:mod:`typedapi.client.result` because they hold live objects (exceptions,
response headers) rather than serialisable configuration.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiConfig(BaseModel):
    """Connection settings for the default HTTP transport.

    Example::

        ApiConfig(base_url="https://api.example.com", timeout=10,
                  headers={"Authorization": "Bearer ..."})
    """

    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(
        default="", alias="url", description="Base URL prepended to every operation path"
    )
    timeout: Optional[float] = Field(
        default=30.0, description="Request timeout in seconds (None disables it)"
    )
    headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = True


class HTTPMethod(str, enum.Enum):
    """HTTP methods that produce an operation when found in a path item."""

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"
    OPTIONS = "options"
    HEAD = "head"


class ProblemCode(str, enum.Enum):
    """Failure category of a non-ok call result.

    ``CLIENT_ERROR`` and ``SERVER_ERROR`` come from the HTTP status of an
    answered request; the others describe requests that never got a usable
    answer, or whose answer failed schema validation.
    """

    CLIENT_ERROR = "CLIENT_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    CANCEL_ERROR = "CANCEL_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
