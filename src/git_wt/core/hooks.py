"""Hook and custom remover execution.

Hooks are arbitrary shell commands taken from ``wt.hook`` (after creation)
and ``wt.deletehook`` (before deletion). Output is streamed to stderr so that
stdout stays reserved for the shell wrapper.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from git_wt.cli.output import user_output
from git_wt.core.errors import HookError

logger = logging.getLogger(__name__)


def shell_argv(command: str, *args: str) -> list[str]:
    """Build argv running command through the system shell.

    Extra args become the shell's positional parameters ($1, $2, ...).
    """
    return ["sh", "-c", command, "--", *args] if args else ["sh", "-c", command]


class HookRunner(ABC):
    """Abstract interface for running user-supplied shell commands."""

    @abstractmethod
    def run_hooks(self, commands: Iterable[str], cwd: Path) -> None:
        """Run each command in order in cwd, stopping at the first failure.

        Raises:
            HookError: Carrying the failing command and its exit status
        """
        ...

    @abstractmethod
    def run_remover(self, remover: str, worktree_path: Path, cwd: Path) -> None:
        """Run the custom remover with the worktree path as $1.

        Raises:
            HookError: If the remover exits non-zero
        """
        ...


class RealHookRunner(HookRunner):
    """Runs commands with the system shell, streaming output to stderr."""

    def run_hooks(self, commands: Iterable[str], cwd: Path) -> None:
        for command in commands:
            user_output(f"Running hook: {command}")
            self._stream(shell_argv(command), command, cwd)

    def run_remover(self, remover: str, worktree_path: Path, cwd: Path) -> None:
        # Passing the path as $1 keeps it intact whatever characters it contains.
        self._stream(shell_argv(f'{remover} "$1"', str(worktree_path)), remover, cwd)

    def _stream(self, argv: list[str], command: str, cwd: Path) -> None:
        logger.debug("run %s (cwd=%s)", argv, cwd)
        with subprocess.Popen(
            argv,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        ) as process:
            assert process.stdout is not None
            for line in process.stdout:
                user_output(line.rstrip("\n"))
            exit_code = process.wait()

        if exit_code != 0:
            raise HookError(command, exit_code)
