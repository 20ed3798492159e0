"""
CLI utilities for command line reconstruction, warning display and error reporting.
"""

from pathlib import Path

import click

from .pipeline.model import GenerationWarning
from .pipeline.schema_ast.loader import SchemaLoadError

COMMAND_NAME = "scedel_to_symfony"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context, return basic command
        return COMMAND_NAME

    if not cli_args:
        return COMMAND_NAME

    arguments = []
    options = []

    for param in click_command.params:
        value = cli_args.get(param.name)
        if not value:
            continue

        if isinstance(param, click.Argument):
            arguments.append(Path(str(value)).name)
            continue

        if isinstance(param, click.Option) and value != param.default:
            flag = param.opts[0] if param.opts else f"--{param.name}"
            # Flags carry no value on the command line
            options.append(flag if param.is_flag else f"{flag} {value}")

    return " ".join([COMMAND_NAME, *options, *arguments])


def format_warning(warning: GenerationWarning) -> str:
    """``- [code] Type.field: message``"""
    return f"- [{warning.code}] {warning.location}: {warning.message}"


def find_cause(exception: BaseException, exception_type: type[BaseException]) -> BaseException | None:
    """Walk the ``__cause__``/``__context__`` chain looking for an exception of the given type."""
    current: BaseException | None = exception
    while current is not None:
        if isinstance(current, exception_type):
            return current
        current = _previous(current)
    return None


def _previous(exception: BaseException) -> BaseException | None:
    return exception.__cause__ or exception.__context__


def format_exception_details(exception: BaseException) -> list[str]:
    """
    Describe a failure as a list of lines for the error report.

    Includes the message, the schema source and parse location for load
    errors, and one ``Caused by:`` line per distinct chained exception.

    Args:
        exception: The exception that aborted the run

    Returns:
        Deduplicated detail lines in order
    """
    lines = [str(exception)]

    load_error = find_cause(exception, SchemaLoadError)
    if isinstance(load_error, SchemaLoadError):
        location = load_error.source or "unknown source"
        if load_error.line is not None and load_error.column is not None:
            location += f" at {load_error.line}:{load_error.column}"
            lines.append(f"Parse error in {location}: {load_error}")
        elif load_error.source is not None:
            lines.append(f"Source: {load_error.source}")

    message = str(exception).strip()
    previous = _previous(exception)
    while previous is not None:
        previous_message = str(previous).strip()
        if not isinstance(previous, SchemaLoadError) and previous_message and previous_message != message:
            lines.append(f"Caused by: {previous_message}")
        previous = _previous(previous)

    return list(dict.fromkeys(lines))
