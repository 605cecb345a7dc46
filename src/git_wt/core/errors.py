"""Domain errors raised by the core and rendered at the CLI boundary.

Every failure the user can see derives from WtError. The CLI catches WtError,
prints its message with a red "Error:" prefix and exits non-zero.
"""

from collections.abc import Sequence
from pathlib import Path

BARE_REPO_ISSUE_URL = "https://github.com/k1LoW/git-wt/issues/130"


class WtError(Exception):
    """Base class for all errors reported to the user."""


class UsageError(WtError):
    """The invocation itself is malformed (argument count, unknown shell)."""


class NotInRepositoryError(WtError):
    """The working directory is not inside a git repository."""


class UnsupportedRepositoryError(WtError):
    """The repository is in a state git-wt does not handle."""


class ResolveError(WtError):
    """A token matched neither a worktree nor a local branch."""

    def __init__(self, token: str) -> None:
        super().__init__(f'no worktree or branch found for "{token}"')
        self.token = token


class SafetyError(WtError):
    """A destructive operation was refused without an explicit override."""


class LegacyPathError(WtError):
    """The historical base directory exists but wt.basedir is not configured."""

    def __init__(self, legacy_dir: Path) -> None:
        super().__init__(
            f"legacy worktree directory found: {legacy_dir}\n"
            "The default wt.basedir is now '.wt' inside the repository.\n"
            "To keep using the old location, run:\n"
            "  git config wt.basedir '../{repo-name}-wt'\n"
            "Otherwise move or remove the old directory."
        )
        self.legacy_dir = legacy_dir


class FilesystemError(WtError):
    """A directory or file needed before invoking git could not be written."""


class GitCommandError(WtError):
    """A git subprocess exited non-zero.

    Carries the argv, the exit status and the combined stdout/stderr output.
    """

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int,
        output: str,
        operation_context: str,
    ) -> None:
        cmd_str = " ".join(str(arg) for arg in cmd)
        message = f"Failed to {operation_context}"
        message += f"\nCommand: {cmd_str}"
        message += f"\nExit code: {returncode}"
        if output.strip():
            message += f"\nOutput: {output.strip()}"
        super().__init__(message)
        self.cmd = list(cmd)
        self.returncode = returncode
        self.output = output


class HookError(WtError):
    """A hook or remover command exited non-zero.

    When the failure happens after a worktree was created, ``worktree_path``
    names it so the CLI can still print the path.
    """

    def __init__(self, command: str, exit_code: int, worktree_path: Path | None = None) -> None:
        super().__init__(f"hook {command!r} failed with exit code {exit_code}")
        self.command = command
        self.exit_code = exit_code
        self.worktree_path = worktree_path
