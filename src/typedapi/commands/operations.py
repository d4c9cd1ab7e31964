"""``typedapi operations`` -- list the operations derived from a spec."""

from __future__ import annotations

import typer

from typedapi.commands import load_prepared_spec
from typedapi.exceptions import TypedApiError
from typedapi.generator import iter_operations, operation_name
from typedapi.output import error, get_output


def operations_command(
    spec: str = typer.Argument(..., help="OpenAPI spec file path or URL."),
) -> None:
    """List every operation with its name, method, and path.

    Entries whose name collides with a later one are still listed; only the
    last of them is reachable by name on a built client.

    Example::

        typedapi operations openapi.yaml
        typedapi --json operations https://api.example.com/openapi.json
    """
    prepared = load_prepared_spec(spec)

    rows: list[list[str]] = []
    try:
        for path, method, descriptor in iter_operations(prepared):
            name = operation_name(method, path, descriptor.get("operationId"))
            rows.append([name, method.upper(), path])
    except TypedApiError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    title = prepared.get("info", {}).get("title") or "API"
    get_output().print_table(["Name", "Method", "Path"], rows, title=f"{title} -- Operations ({len(rows)})")
