"""Numeric process exit codes used by the ``typedapi`` command line.

Each constant maps to a failure category. Library exceptions carry one of
them in their ``exit_code`` attribute, and :func:`exit_code_for_problem`
maps a :class:`~typedapi.models.ProblemCode` from a failed call onto the
same table, so shell scripts can branch on ``$?`` without parsing output.

Example::

    $ typedapi call openapi.json getUser -P id=7
    $ echo $?
    4   # EXIT_CLIENT_ERROR -- the API answered with a 4xx
"""

from __future__ import annotations

from typedapi.models import ProblemCode

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing path parameters."""

EXIT_CLIENT_ERROR = 4
"""The remote API answered with an HTTP 4xx status."""

EXIT_SERVER_ERROR = 5
"""The remote API answered with an HTTP 5xx status."""

EXIT_CONNECTION_ERROR = 6
"""The request never got an answer (network failure, refused, timeout, cancelled)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be loaded or parsed."""

EXIT_VALIDATION_ERROR = 8
"""The response payload failed schema validation."""


_PROBLEM_EXIT_CODES: dict[ProblemCode, int] = {
    ProblemCode.CLIENT_ERROR: EXIT_CLIENT_ERROR,
    ProblemCode.SERVER_ERROR: EXIT_SERVER_ERROR,
    ProblemCode.CONNECTION_ERROR: EXIT_CONNECTION_ERROR,
    ProblemCode.NETWORK_ERROR: EXIT_CONNECTION_ERROR,
    ProblemCode.TIMEOUT_ERROR: EXIT_CONNECTION_ERROR,
    ProblemCode.CANCEL_ERROR: EXIT_CONNECTION_ERROR,
    ProblemCode.VALIDATION_ERROR: EXIT_VALIDATION_ERROR,
    ProblemCode.UNKNOWN_ERROR: EXIT_GENERIC_FAILURE,
}


def exit_code_for_problem(problem: ProblemCode | None) -> int:
    """Return the process exit code for a call result's ``problem``.

    ``None`` (an ok result) maps to :data:`EXIT_SUCCESS`.
    """
    if problem is None:
        return EXIT_SUCCESS
    return _PROBLEM_EXIT_CODES.get(problem, EXIT_GENERIC_FAILURE)
