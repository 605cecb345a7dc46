"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
codebase more testable and maintainable.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit (tests/fakes/git.py): In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

DETACHED_BRANCH = "[detached]"


@dataclass(frozen=True)
class WorktreeInfo:
    """Information about a single git worktree.

    ``branch`` is the short branch name, ``[detached]`` for a detached HEAD,
    or empty for a bare repository root. ``head`` is the seven-character
    commit prefix (empty for a bare root or an unborn branch).
    """

    path: Path
    branch: str
    head: str
    bare: bool = False


@dataclass(frozen=True)
class GitDirs:
    """Absolute git-dir and common-dir as reported by rev-parse."""

    git_dir: Path
    common_dir: Path

    @property
    def is_bare(self) -> bool:
        # A non-bare repository keeps its administrative data in a ".git" dir.
        return self.common_dir.name != ".git"

    @property
    def is_linked_worktree(self) -> bool:
        return self.git_dir != self.common_dir

    @property
    def main_repo_root(self) -> Path:
        if self.is_bare:
            return self.common_dir
        return self.common_dir.parent


def find_worktree_for_branch(worktrees: list[WorktreeInfo], branch: str) -> WorktreeInfo | None:
    """Find the non-bare worktree that has the given branch checked out."""
    if branch == DETACHED_BRANCH:
        return None
    for wt in worktrees:
        if wt.bare:
            continue
        if wt.branch == branch:
            return wt
    return None


# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def list_worktrees(self, cwd: Path) -> list[WorktreeInfo]:
        """List all worktrees, main working tree (or bare root) first."""
        ...

    @abstractmethod
    def list_local_branches(self, cwd: Path) -> list[str]:
        """List all local branch names in the repository."""
        ...

    @abstractmethod
    def list_remote_branches(self, cwd: Path) -> list[str]:
        """List remote-tracking branch names.

        Returns branch names in format 'origin/branch-name'. Symbolic refs
        such as 'origin/HEAD' are excluded.
        """
        ...

    @abstractmethod
    def branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check whether a branch exists locally or as origin's remote-tracking branch."""
        ...

    @abstractmethod
    def local_branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check whether refs/heads/<branch> exists."""
        ...

    @abstractmethod
    def get_commit_message(self, cwd: Path, branch: str) -> str:
        """Get the subject line of the branch's tip commit.

        Returns:
            The subject line, or an empty string when it cannot be read
        """
        ...

    @abstractmethod
    def get_default_branch(self, cwd: Path) -> str | None:
        """Detect the repository's default branch.

        Reads origin's HEAD symbolic ref first, then falls back to 'main' and
        'master' when they exist locally.

        Returns:
            The default branch name, or None if none can be determined
        """
        ...

    @abstractmethod
    def get_git_dirs(self, cwd: Path) -> GitDirs | None:
        """Get absolute git-dir and common-dir for cwd.

        Returns:
            GitDirs, or None if cwd is not inside a git repository
        """
        ...

    @abstractmethod
    def get_worktree_root(self, cwd: Path) -> Path | None:
        """Get the root of the working tree containing cwd, or None outside one."""
        ...

    @abstractmethod
    def get_show_prefix(self, cwd: Path) -> str:
        """Get cwd relative to its working-tree root, without trailing slash.

        Returns an empty string at the root.
        """
        ...

    @abstractmethod
    def add_worktree(
        self,
        cwd: Path,
        path: Path,
        *,
        branch: str,
        create_branch: bool,
        start_point: str | None,
    ) -> None:
        """Add a new git worktree at path checked out at branch.

        Args:
            cwd: Directory to run git in
            path: Location of the new worktree
            branch: Branch to check out (or create)
            create_branch: Create ``branch`` instead of checking out an existing one
            start_point: Commit-ish the new branch starts from (HEAD when None)
        """
        ...

    @abstractmethod
    def remove_worktree(self, cwd: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree. Without force, git refuses dirty worktrees."""
        ...

    @abstractmethod
    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        """Delete a local branch with -d, or -D when force is set."""
        ...

    @abstractmethod
    def prune_worktrees(self, cwd: Path) -> None:
        """Prune stale worktree metadata."""
        ...

    @abstractmethod
    def get_config(self, cwd: Path, key: str) -> str | None:
        """Get a single config value, or None when the key is not set."""
        ...

    @abstractmethod
    def get_config_all(self, cwd: Path, key: str) -> list[str]:
        """Get every value of a multi-valued key, in insertion order."""
        ...

    @abstractmethod
    def set_config(self, cwd: Path, key: str, value: str) -> None:
        """Set a config value in the repository's local config."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check whether the worktree at cwd has modified or untracked files."""
        ...

    @abstractmethod
    def list_ignored_files(self, cwd: Path) -> list[str]:
        """List ignored files relative to cwd."""
        ...

    @abstractmethod
    def list_untracked_files(self, cwd: Path) -> list[str]:
        """List untracked, non-ignored files relative to cwd."""
        ...

    @abstractmethod
    def list_modified_files(self, cwd: Path) -> list[str]:
        """List tracked files with unstaged modifications relative to cwd."""
        ...
