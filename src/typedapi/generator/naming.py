"""Derive identifier-safe operation names from OpenAPI path items.

An operation's declared ``operationId`` wins when present; it is only
sanitised so that it can be used as a Python attribute name. Otherwise the
name is derived from the HTTP method and the path::

    >>> operation_name("post", "/order/{id}/items/{itemId}")
    'postOrderIdItemsItemId'
    >>> operation_name("get", "/user/{id}", "get-user")
    'get_user'

Derived names are not deduplicated; see
:func:`~typedapi.generator.builder.build_client` for how collisions behave.
"""

from __future__ import annotations

import re
from typing import Optional

# Matches any character that is not alphanumeric or underscore.
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")

# Path punctuation that separates words in a derived name.
_PATH_PUNCT_RE = re.compile(r"[/{}]")

# An uppercase run not followed by a lowercase letter (acronym), a word with
# an optional leading capital, or a run of digits.
_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def operation_name(method: str, path: str, declared_name: Optional[str] = None) -> str:
    """Return the operation name for *method* on *path*.

    Args:
        method: HTTP method token (``"get"``, ``"post"``, ...).
        path: URL template, e.g. ``/user/{id}``.
        declared_name: The operation's ``operationId``, if any.

    Returns:
        A name containing only ``[A-Za-z0-9_]``.
    """
    if declared_name:
        return sanitize_name(declared_name)
    words = f"{method} {_PATH_PUNCT_RE.sub(' ', path)}"
    return sanitize_name(camel_case(words))


def sanitize_name(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with ``_``."""
    return _INVALID_IDENT_RE.sub("_", name)


def split_words(text: str) -> list[str]:
    """Split *text* into words on punctuation, case changes, and digit runs.

    ``"getHTTPResponse"`` gives ``["get", "HTTP", "Response"]`` and
    ``"v2beta"`` gives ``["v", "2", "beta"]``.
    """
    return _WORD_RE.findall(text)


def camel_case(text: str) -> str:
    """Convert *text* to lowerCamelCase (``"post order itemId"`` -> ``"postOrderItemId"``)."""
    words = [word.lower() for word in split_words(text)]
    if not words:
        return ""
    return words[0] + "".join(word[:1].upper() + word[1:] for word in words[1:])
