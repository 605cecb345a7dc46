"""Output helpers with clear intent.

- user_output: diagnostics and progress for humans, written to stderr
- machine_output: data the shell wrapper reads, written to stdout

The shell wrapper changes directory to the last stdout line, so nothing but
paths, tables, JSON and delete status lines may reach stdout.
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Write wrapper-facing data to stdout."""
    click.echo(message, nl=nl)
