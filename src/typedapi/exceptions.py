"""Exception hierarchy for typedapi.

Only *programmer* and *setup* errors are raised as exceptions. Failures of
an HTTP round-trip are never raised to the caller of an operation; they are
returned as :class:`~typedapi.client.result.ApiErrorResponse` values (see
:mod:`typedapi.client.response`).

All exceptions inherit from :class:`TypedApiError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`typedapi.exit_codes`.
The CLI entry point in :func:`typedapi.app.main` catches ``TypedApiError``
and exits with that code.

Subclass hierarchy::

    TypedApiError (exit 1)
    +-- InvalidUsageError            (exit 2)
    |   +-- MissingPathParameterError
    |   +-- PrimitiveParameterError
    +-- SpecParseError               (exit 7)
    +-- ConfigError                  (exit 1)
"""

from __future__ import annotations

from typedapi.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


class TypedApiError(Exception):
    """Base exception for all typedapi errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TypedApiError):
    """Raised when an operation is called with arguments it cannot use."""

    exit_code = EXIT_INVALID_USAGE


class MissingPathParameterError(InvalidUsageError):
    """Raised when a URL template placeholder has no value in the call parameters.

    Attributes:
        name: The placeholder name that could not be filled.
    """

    def __init__(self, name: str):
        super().__init__(f"Missing path parameter: {name}")
        self.name = name


class PrimitiveParameterError(InvalidUsageError):
    """Raised when a bare string/number is passed to an operation without placeholders."""

    def __init__(self, message: str = "Primitives are only supported as path params"):
        super().__init__(message)


class SpecParseError(TypedApiError):
    """Raised when the OpenAPI spec cannot be loaded, parsed, or walked."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ConfigError(TypedApiError):
    """Raised for invalid client configuration (bad timeout, malformed header)."""

    exit_code = EXIT_GENERIC_FAILURE
