"""Inline internal ``$ref`` pointers of an OpenAPI document.

Only ``#/...`` JSON pointers are followed; external references raise
:class:`~typedapi.exceptions.SpecParseError`. A reference that points back
into itself (a recursive schema) is left as its ``$ref`` dict at the point
where the cycle closes.
"""

from __future__ import annotations

import copy
from typing import Any

from typedapi.exceptions import SpecParseError


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a deep copy of *spec* with every internal ``$ref`` inlined.

    Raises:
        SpecParseError: On external references or pointers that do not exist.
    """
    root = copy.deepcopy(spec)
    return _resolve_node(root, root, frozenset())


def lookup_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Follow the JSON pointer *ref* (``#/components/schemas/Pet``) inside *root*.

    Handles RFC 6901 escapes (``~1`` is ``/``, ``~0`` is ``~``) and list
    indices.

    Raises:
        SpecParseError: If *ref* is external or a segment does not exist.
    """
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. Only internal references (#/...) are handled."
        )

    node: Any = root
    for raw_segment in ref[2:].split("/"):
        segment = raw_segment.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict):
            if segment not in node:
                raise SpecParseError(f"Cannot resolve $ref '{ref}': key '{segment}' not found")
            node = node[segment]
        elif isinstance(node, list):
            try:
                node = node[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': cannot descend into {type(node).__name__}"
            )
    return node


def _resolve_node(node: Any, root: dict[str, Any], active: frozenset[str]) -> Any:
    # *active* holds the refs on the current resolution path only, so that
    # sibling branches may each inline the same target.
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            if ref in active:
                return node
            return _resolve_node(lookup_pointer(ref, root), root, active | {ref})
        return {key: _resolve_node(value, root, active) for key, value in node.items()}
    if isinstance(node, list):
        return [_resolve_node(item, root, active) for item in node]
    return node
