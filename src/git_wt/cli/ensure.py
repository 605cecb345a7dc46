"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands,
and wt_error_boundary for rendering domain errors raised by the core. All errors
use a red "Error:" prefix for visual consistency.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from git_wt.cli.output import machine_output, user_output
from git_wt.core.errors import HookError, WtError


def render_error(message: str) -> None:
    user_output(click.style("Error: ", fg="red") + message)


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Args:
            condition: Boolean condition to check
            error_message: Error message to display if condition is false.
                          "Error: " prefix will be added automatically in red.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            render_error(error_message)
            raise SystemExit(1)


def wt_error_boundary(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that turns WtError into a styled message and exit code 1.

    A HookError raised after a worktree was created still prints the
    worktree path on stdout first, so the shell wrapper sees it, while the
    non-zero exit stops the wrapper from changing directory.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HookError as e:
            if e.worktree_path is not None:
                machine_output(str(e.worktree_path))
            render_error(str(e))
            raise SystemExit(1) from e
        except WtError as e:
            render_error(str(e))
            raise SystemExit(1) from e

    return wrapper
