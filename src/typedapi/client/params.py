"""Split one flat parameter object into path and query parameters.

Every generated operation accepts a single ``parameters`` argument. Keys that
match a ``{placeholder}`` in the operation's URL template are substituted
into the path (percent-encoded); everything else becomes a query parameter::

    >>> split_params("/user/{id}", {"id": 7, "expand": "details"})
    SplitParamsResult(url='/user/7', path_params={'id': 7}, query_params={'expand': 'details'})

A bare string or number is accepted as shorthand when the template has
exactly one placeholder::

    >>> split_params("/search/{term}", "hello world").url
    '/search/hello%20world'
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, NamedTuple, Union
from urllib.parse import quote

from typedapi.exceptions import MissingPathParameterError, PrimitiveParameterError

Parameters = Union[Mapping[str, Any], str, int, float, None]

# A placeholder is whatever sits between one pair of braces.
_PLACEHOLDER_RE = re.compile(r"\{([^}]+)\}")

# Characters encodeURIComponent leaves untouched besides letters, digits and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"


class SplitParamsResult(NamedTuple):
    """Outcome of :func:`split_params`."""

    url: str
    path_params: dict[str, Any]
    query_params: dict[str, Any]


def placeholder_names(url_template: str) -> list[str]:
    """Return the placeholder names of *url_template* in template order."""
    return _PLACEHOLDER_RE.findall(url_template)


def split_params(url_template: str, parameters: Parameters = None) -> SplitParamsResult:
    """Fill *url_template* from *parameters* and return the remaining query params.

    Args:
        url_template: Path template such as ``/user/{id}/items/{itemId}``.
        parameters: A mapping of parameter values, a single primitive used as
            the value of a single-placeholder template, or ``None``.

    Returns:
        A :class:`SplitParamsResult` with the concrete URL, the consumed path
        parameters, and every other key as query parameters.

    Raises:
        PrimitiveParameterError: A primitive was passed but the template has
            no placeholders.
        MissingPathParameterError: A placeholder has no value. Raised for the
            first missing placeholder in template order.
    """
    keys = placeholder_names(url_template)

    if _is_primitive(parameters):
        if not keys:
            raise PrimitiveParameterError()
        # With several placeholders a lone primitive fills none of them.
        source: Mapping[str, Any] = {keys[0]: parameters} if len(keys) == 1 else {}
    elif isinstance(parameters, Mapping):
        source = parameters
    else:
        source = {}

    url = url_template
    path_params: dict[str, Any] = {}
    for key in keys:
        if key not in source:
            raise MissingPathParameterError(key)
        value = source[key]
        path_params[key] = value
        url = url.replace("{" + key + "}", encode_path_value(value), 1)

    query_params = {k: v for k, v in source.items() if k not in path_params}
    return SplitParamsResult(url, path_params, query_params)


def encode_path_value(value: Any) -> str:
    """Percent-encode *value* the way ``encodeURIComponent`` would.

    ``42``, ``42.0`` and ``"42"`` all encode to ``42``; booleans encode as
    ``true``/``false``.
    """
    return quote(_to_text(value), safe=_URI_COMPONENT_SAFE)


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_primitive(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)
