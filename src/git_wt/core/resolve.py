"""Token resolution against existing worktrees.

A token is matched in strict priority order:

1. the branch checked out in a non-bare worktree
2. the worktree's path relative to the base directory
3. an existing filesystem path that resolves to a worktree path

Anything else is a candidate for a new (or existing, unchecked-out) branch.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from git_wt.core.git.abc import WorktreeInfo, find_worktree_for_branch

type MatchKind = Literal["branch", "dir", "path"]


@dataclass(frozen=True)
class WorktreeMatch:
    """The token names an existing worktree."""

    kind: MatchKind
    worktree: WorktreeInfo


@dataclass(frozen=True)
class NewTarget:
    """No worktree matched; the token is treated as a branch name."""

    token: str


type Resolution = WorktreeMatch | NewTarget


def relative_to_base(base_dir: Path, path: Path) -> str | None:
    """Return path relative to base_dir, or None when path lies outside it."""
    rel = os.path.relpath(path, base_dir)
    if rel == ".." or rel.startswith(".." + os.sep):
        return None
    return Path(rel).as_posix()


def resolve_worktree(
    worktrees: list[WorktreeInfo],
    token: str,
    base_dir: Path,
    cwd: Path,
) -> Resolution:
    """Resolve a token to a worktree, or to a new target.

    Args:
        worktrees: Current worktree list
        token: User-supplied branch name, directory name or path
        base_dir: Expanded worktree base directory
        cwd: Directory relative tokens are interpreted against
    """
    by_branch = find_worktree_for_branch(worktrees, token)
    if by_branch is not None:
        return WorktreeMatch(kind="branch", worktree=by_branch)

    for wt in worktrees:
        if wt.bare:
            continue
        if relative_to_base(base_dir, wt.path) == token:
            return WorktreeMatch(kind="dir", worktree=wt)

    candidate = Path(token)
    if not candidate.is_absolute():
        candidate = cwd / candidate
    if candidate.is_dir():
        resolved = candidate.resolve()
        for wt in worktrees:
            if wt.path.resolve() == resolved:
                return WorktreeMatch(kind="path", worktree=wt)

    return NewTarget(token=token)
