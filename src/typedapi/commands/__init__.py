"""CLI sub-commands and the helpers they share."""

from __future__ import annotations

from typing import Any

import typer

from typedapi.exceptions import TypedApiError
from typedapi.output import error


def load_prepared_spec(source: str) -> dict[str, Any]:
    """Load, validate, and dereference *source*, exiting with its code on failure."""
    from typedapi.parser import load_spec, prepare_spec

    try:
        return prepare_spec(load_spec(source))
    except TypedApiError as exc:
        error(f"Failed to load spec: {exc}")
        raise typer.Exit(code=exc.exit_code) from None
