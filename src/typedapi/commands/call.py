"""``typedapi call`` -- invoke one operation and print its result.

The payload goes to stdout and the status line to stderr. The process exit
code follows the result's problem (see :mod:`typedapi.exit_codes`), so
``typedapi call ... && next-step`` only continues on an ok result.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from typedapi.client.result import ApiResponse
from typedapi.client.transport import HttpTransport
from typedapi.commands import load_prepared_spec
from typedapi.config import parse_header_list, resolve_api_config
from typedapi.exceptions import InvalidUsageError, TypedApiError
from typedapi.exit_codes import EXIT_SUCCESS, exit_code_for_problem
from typedapi.generator import build_client
from typedapi.models import ApiConfig
from typedapi.output import debug, error, get_output, info, warning


def call_command(
    spec: str = typer.Argument(..., help="OpenAPI spec file path or URL."),
    operation: str = typer.Argument(..., help="Operation name (see 'typedapi operations')."),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Parameter as key=value. Repeatable."
    ),
    body: Optional[str] = typer.Option(None, "--body", "-d", help="Request body (JSON or raw text)."),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Base URL. Defaults to $TYPEDAPI_BASE_URL, then the spec's first server."
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Timeout in seconds."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra header as 'Name: value'. Repeatable."
    ),
) -> None:
    """Call OPERATION from SPEC.

    Example::

        typedapi call openapi.yaml getUser -P id=7 -P expand=details
        typedapi call openapi.yaml createUser -P id=7 --body '{"name": "Ada"}'
    """
    prepared = load_prepared_spec(spec)

    try:
        config = resolve_api_config(
            base_url=base_url,
            timeout=timeout,
            headers=parse_header_list(header or []),
        )
        if not config.base_url:
            config = config.model_copy(update={"base_url": _first_server_url(prepared)})
        if not config.base_url:
            warning("No base URL given and the spec lists no servers; request URLs stay relative")
        parameters = parse_params(param or [])
        result = asyncio.run(_call(prepared, config, operation, parameters, parse_body(body)))
    except TypedApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    _report(result)
    code = exit_code_for_problem(result.problem)
    if code != EXIT_SUCCESS:
        raise typer.Exit(code=code)


async def _call(
    spec: dict[str, Any],
    config: ApiConfig,
    operation: str,
    parameters: dict[str, Any],
    body: Any,
) -> ApiResponse:
    async with build_client(spec, HttpTransport.from_config(config)) as client:
        if operation not in client:
            raise InvalidUsageError(f"Unknown operation: {operation}")
        debug(f"Calling {client[operation]!r} on {config.base_url or '(no base URL)'}")
        return await client[operation](parameters, body)


def _report(result: ApiResponse) -> None:
    duration = f" in {result.duration:.3f}s" if result.duration is not None else ""
    if result.ok:
        info(f"HTTP {result.status}{duration}")
        get_output().format_response(result.data)
        return

    status = f" (HTTP {result.status})" if result.status is not None else ""
    error(f"{result.problem.value}{status}{duration}: {result.original_error}")
    if result.data:
        get_output().format_response(result.data)


def parse_params(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` strings into a parameter dict.

    Raises:
        InvalidUsageError: If an entry has no ``=`` or an empty key.
    """
    params: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Invalid parameter {pair!r} (expected key=value)")
        params[key] = value
    return params


def parse_body(body: Optional[str]) -> Any:
    """Decode *body* as JSON when possible, otherwise keep the raw string."""
    if body is None:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return body


def _first_server_url(spec: dict[str, Any]) -> str:
    servers = spec.get("servers") or []
    if servers and isinstance(servers[0], dict):
        return str(servers[0].get("url", ""))
    return ""
