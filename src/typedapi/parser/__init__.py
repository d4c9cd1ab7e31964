"""Load and prepare OpenAPI documents for :func:`~typedapi.generator.build_client`.

Typical usage::

    from typedapi.parser import load_spec, prepare_spec

    spec = prepare_spec(load_spec("openapi.yaml"))

Sub-modules:

* :mod:`~typedapi.parser.loader` -- file/URL I/O, JSON/YAML parsing, and
  OpenAPI version validation.
* :mod:`~typedapi.parser.resolver` -- internal ``$ref`` inlining.
"""

from __future__ import annotations

from typing import Any

from typedapi.parser.loader import load_spec, load_spec_async, validate_openapi_version
from typedapi.parser.resolver import resolve_refs


def prepare_spec(raw: dict[str, Any]) -> dict[str, Any]:
    """Validate the OpenAPI version of *raw* and return it with refs inlined."""
    validate_openapi_version(raw)
    return resolve_refs(raw)


__all__ = [
    "load_spec",
    "load_spec_async",
    "prepare_spec",
    "resolve_refs",
    "validate_openapi_version",
]
