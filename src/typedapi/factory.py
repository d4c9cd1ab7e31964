"""One-call entry point: spec (or spec location) in, client out.

``create_typed_api`` returns the client directly when given a spec dict,
and an awaitable when given a location that still has to be loaded::

    client = create_typed_api(spec_dict, ApiConfig(base_url="https://api.example.com"))

    client = await create_typed_api("https://api.example.com/openapi.json")
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Any, Optional, Union, overload

from typedapi.client.api import ApiClient
from typedapi.client.transport import HttpTransport
from typedapi.generator.builder import build_client
from typedapi.models import ApiConfig
from typedapi.parser import load_spec_async, prepare_spec


@overload
def create_typed_api(
    spec_or_location: str,
    config: Optional[ApiConfig] = None,
    *,
    validators: Optional[Mapping[str, Any]] = None,
    transport: Any = None,
) -> Awaitable[ApiClient]: ...


@overload
def create_typed_api(
    spec_or_location: Mapping[str, Any],
    config: Optional[ApiConfig] = None,
    *,
    validators: Optional[Mapping[str, Any]] = None,
    transport: Any = None,
) -> ApiClient: ...


def create_typed_api(
    spec_or_location: Union[str, Mapping[str, Any]],
    config: Optional[ApiConfig] = None,
    *,
    validators: Optional[Mapping[str, Any]] = None,
    transport: Any = None,
) -> Union[ApiClient, Awaitable[ApiClient]]:
    """Build a client from a spec dict, or schedule it from a spec location.

    Args:
        spec_or_location: An already-loaded spec (with a ``paths`` object), or
            a file path / URL to load it from.
        config: Settings for the default :class:`HttpTransport`. Ignored when
            *transport* is given.
        validators: Optional operation name to response validator map.
        transport: A ready transport to build on instead of a new
            :class:`HttpTransport`.

    Returns:
        The :class:`ApiClient` for a spec dict; a coroutine resolving to it
        for a location string. Loading happens only when it is awaited.
    """
    if isinstance(spec_or_location, str):
        return _create_from_location(spec_or_location, config, validators, transport)

    if transport is None:
        transport = HttpTransport.from_config(config or ApiConfig())
    return build_client(spec_or_location, transport, validators)


async def _create_from_location(
    location: str,
    config: Optional[ApiConfig],
    validators: Optional[Mapping[str, Any]],
    transport: Any,
) -> ApiClient:
    spec = prepare_spec(await load_spec_async(location))
    if transport is None:
        transport = HttpTransport.from_config(config or ApiConfig())
    return build_client(spec, transport, validators)
