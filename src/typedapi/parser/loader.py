"""Load OpenAPI documents from a local file or an HTTP(S) URL.

:func:`load_spec` blocks; :func:`load_spec_async` fetches URLs with
:class:`httpx.AsyncClient` and is what the asynchronous facade uses. Both
accept JSON or YAML, guess the format from the file extension or the
``Content-Type`` header, and return a plain dict.

:func:`validate_openapi_version` rejects Swagger 2.x and documents without
an ``openapi`` field before the path table is walked.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import yaml

from typedapi.exceptions import SpecParseError

_URL_PREFIXES = ("http://", "https://")
_FETCH_TIMEOUT = 30.0


def load_spec(source: str) -> dict[str, Any]:
    """Load an OpenAPI spec from a URL or file path.

    Raises:
        SpecParseError: If the source cannot be fetched, read, or parsed.
    """
    if source.startswith(_URL_PREFIXES):
        try:
            response = httpx.get(source, timeout=_FETCH_TIMEOUT, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SpecParseError(
                f"HTTP {exc.response.status_code} fetching spec from {source}"
            ) from exc
        except httpx.RequestError as exc:
            raise SpecParseError(f"Failed to fetch spec from {source}: {exc}") from exc
        return _parse_response(response)
    return _load_from_file(source)


async def load_spec_async(source: str) -> dict[str, Any]:
    """Asynchronous :func:`load_spec`. Local files are still read synchronously."""
    if not source.startswith(_URL_PREFIXES):
        return _load_from_file(source)

    async with httpx.AsyncClient(timeout=_FETCH_TIMEOUT, follow_redirects=True) as client:
        try:
            response = await client.get(source)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SpecParseError(
                f"HTTP {exc.response.status_code} fetching spec from {source}"
            ) from exc
        except httpx.RequestError as exc:
            raise SpecParseError(f"Failed to fetch spec from {source}: {exc}") from exc
    return _parse_response(response)


def _parse_response(response: httpx.Response) -> dict[str, Any]:
    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = "json" if suffix == ".json" else "yaml" if suffix in (".yaml", ".yml") else ""
    return parse_content(content, hint=hint)


def parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML into a dict.

    JSON is tried first unless *hint* is ``"yaml"``; with a ``"json"`` hint a
    JSON error is final. Otherwise YAML gets a turn (valid JSON is also
    valid YAML, so YAML-first would hide JSON syntax errors).

    Raises:
        SpecParseError: If neither format parses to a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Return the document's OpenAPI version, rejecting anything but 3.x.

    Raises:
        SpecParseError: For Swagger 2.x, a missing ``openapi`` field, or a
            non-3.x version.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.x documents can be loaded."
        )

    version = spec.get("openapi")
    if version is None:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. Only OpenAPI 3.x is supported."
        )
    return version_str
