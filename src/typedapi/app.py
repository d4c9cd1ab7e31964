"""Typer application and console entry point for ``typedapi``.

Commands:

* ``typedapi operations SPEC`` -- list the operations a client built from
  SPEC would expose.
* ``typedapi call SPEC OPERATION`` -- build the client, call one operation,
  and print the uniform result.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. :class:`~typedapi.exceptions.TypedApiError` escaping a
command is printed and turned into its exit code.
"""

from __future__ import annotations

import sys

import typer

from typedapi import __version__
from typedapi.commands.call import call_command
from typedapi.commands.operations import operations_command
from typedapi.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="typedapi",
    help="Call OpenAPI operations through a generated client.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("operations")(operations_command)
app.command("call")(call_command)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"typedapi {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the global output manager from the formatting flags."""
    from typedapi.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(output)


def main() -> None:
    """Run the CLI, mapping library errors onto exit codes."""
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from typedapi.exceptions import TypedApiError
        from typedapi.output import error

        if isinstance(exc, TypedApiError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
