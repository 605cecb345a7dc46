"""Repository state detection.

Classifies the repository containing a directory into one of four states:
bare or non-bare, crossed with main working tree or linked worktree. The
result comes from a single rev-parse query and is cached per directory for
the lifetime of one invocation.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from git_wt.core.errors import BARE_REPO_ISSUE_URL, NotInRepositoryError, UnsupportedRepositoryError
from git_wt.core.git.abc import Git

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepoContext:
    """Detected repository state.

    Attributes:
        bare: The main repository has no working tree
        worktree: The directory is inside a linked (non-main) worktree
        main_root: Bare directory itself, or the parent of the .git directory
        detected_at: Directory the detection ran from
    """

    bare: bool
    worktree: bool
    main_root: Path
    detected_at: Path


class RepoContextDetector:
    """Detects and caches the RepoContext for a working directory."""

    def __init__(self, git: Git) -> None:
        self._git = git
        self._cached: RepoContext | None = None

    def detect(self, cwd: Path) -> RepoContext:
        """Return the repository context for cwd.

        Raises:
            NotInRepositoryError: If cwd is not inside a git repository
        """
        if self._cached is not None and self._cached.detected_at == cwd:
            return self._cached

        dirs = self._git.get_git_dirs(cwd)
        if dirs is None:
            raise NotInRepositoryError(f"not a git repository: {cwd}")

        context = RepoContext(
            bare=dirs.is_bare,
            worktree=dirs.is_linked_worktree,
            main_root=dirs.main_repo_root,
            detected_at=cwd,
        )
        logger.debug(
            "repository context at %s: bare=%s worktree=%s", cwd, context.bare, context.worktree
        )
        self._cached = context
        return context


def ensure_not_bare(context: RepoContext) -> None:
    """Refuse to operate on a bare repository.

    Raises:
        UnsupportedRepositoryError: If the repository is bare
    """
    if context.bare:
        raise UnsupportedRepositoryError(
            "bare repositories are not currently supported by git-wt\n"
            f"See {BARE_REPO_ISSUE_URL}"
        )
