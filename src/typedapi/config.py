"""Resolve :class:`~typedapi.models.ApiConfig` from arguments and the environment.

Precedence, highest first:

1. Explicit arguments (CLI flags, keyword arguments).
2. Environment variables ``TYPEDAPI_BASE_URL`` and ``TYPEDAPI_TIMEOUT``.
3. Model defaults.

Headers are merged rather than replaced: ``TYPEDAPI_HEADERS`` (a
``;``-separated list of ``Name: value`` pairs) provides the base set and
explicit headers override entries with the same name.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import ValidationError

from typedapi.exceptions import ConfigError
from typedapi.models import ApiConfig

ENV_BASE_URL = "TYPEDAPI_BASE_URL"
ENV_TIMEOUT = "TYPEDAPI_TIMEOUT"
ENV_HEADERS = "TYPEDAPI_HEADERS"


def resolve_api_config(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    headers: Optional[dict[str, str]] = None,
) -> ApiConfig:
    """Build the effective :class:`ApiConfig`.

    Args:
        base_url: Explicit base URL; falls back to ``TYPEDAPI_BASE_URL``.
        timeout: Explicit timeout in seconds; falls back to ``TYPEDAPI_TIMEOUT``.
        headers: Explicit headers, layered over ``TYPEDAPI_HEADERS``.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: If an environment value cannot be parsed.
    """
    values: dict[str, object] = {}

    env_base_url = os.environ.get(ENV_BASE_URL, "")
    if base_url is not None:
        values["base_url"] = base_url
    elif env_base_url:
        values["base_url"] = env_base_url

    env_timeout = os.environ.get(ENV_TIMEOUT, "")
    if timeout is not None:
        values["timeout"] = timeout
    elif env_timeout:
        try:
            values["timeout"] = float(env_timeout)
        except ValueError as exc:
            raise ConfigError(
                f"Invalid {ENV_TIMEOUT} value: {env_timeout!r} (expected seconds)"
            ) from exc

    merged_headers = parse_header_list(os.environ.get(ENV_HEADERS, ""), separator=";")
    merged_headers.update(headers or {})
    values["headers"] = merged_headers

    try:
        return ApiConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc


def parse_header_list(raw: str | list[str], separator: str | None = None) -> dict[str, str]:
    """Parse ``Name: value`` header strings into a dict.

    Args:
        raw: Either a list of ``Name: value`` strings or one string holding
            several entries joined by *separator*.
        separator: Entry separator when *raw* is a single string.

    Raises:
        ConfigError: If an entry has no ``:``.
    """
    if isinstance(raw, str):
        entries = raw.split(separator) if separator else [raw]
    else:
        entries = raw

    result: dict[str, str] = {}
    for entry in entries:
        if not entry.strip():
            continue
        name, sep, value = entry.partition(":")
        if not sep or not name.strip():
            raise ConfigError(f"Malformed header {entry!r} (expected 'Name: value')")
        result[name.strip()] = value.strip()
    return result
