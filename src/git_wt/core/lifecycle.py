"""Worktree lifecycle: create-or-switch, delete and list.

These functions sequence the git driver, copy engine and hook runner. They
never write diagnostics to stdout; the only stdout lines produced here are
the delete status messages.
"""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from git_wt.cli.output import machine_output, user_output
from git_wt.core.base_dir import check_legacy_base_dir, expand_base_dir, prepare_worktree_parent
from git_wt.core.config import NoCdMode, WtConfig
from git_wt.core.context import WtContext
from git_wt.core.copy import copy_files, copy_options_from_config, exclude_dirs_for
from git_wt.core.errors import GitCommandError, HookError, ResolveError, SafetyError
from git_wt.core.git.abc import DETACHED_BRANCH, WorktreeInfo
from git_wt.core.repo_context import ensure_not_bare
from git_wt.core.resolve import WorktreeMatch, relative_to_base, resolve_worktree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwitchResult:
    """Outcome of create-or-switch."""

    path: Path
    created: bool


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a delete run.

    ``removed_current`` is set when the worktree containing the working
    directory was among those removed.
    """

    main_root: Path
    removed_current: bool


@dataclass(frozen=True)
class ListEntry:
    path: Path
    branch: str
    head: str
    bare: bool
    current: bool


def create_or_switch(
    ctx: WtContext,
    config: WtConfig,
    token: str,
    start_point: str | None,
) -> SwitchResult:
    """Return the worktree for token, creating it when none exists.

    An existing worktree is returned untouched: nothing is copied and no hook
    runs. For a new worktree the branch is checked out if it exists (locally
    or on origin), otherwise created from start_point or HEAD. Ignored,
    untracked and modified files are then copied per configuration and the
    create hooks run inside the new worktree.

    Raises:
        UnsupportedRepositoryError: In a bare repository
        LegacyPathError: If the old default base directory is still present
        FilesystemError: If the parent directory cannot be created
        GitCommandError: If git refuses to add the worktree
        HookError: If a create hook fails; ``worktree_path`` is the new worktree's
            printable path (see emitted_path)
    """
    repo = ctx.repo_context()
    ensure_not_bare(repo)
    check_legacy_base_dir(config, repo.main_root)
    base_dir = expand_base_dir(config.base_dir, repo.main_root)

    worktrees = ctx.git.list_worktrees(ctx.cwd)
    resolution = resolve_worktree(worktrees, token, base_dir, ctx.cwd)
    if isinstance(resolution, WorktreeMatch):
        logger.debug(
            "token %r matched worktree %s by %s", token, resolution.worktree.path, resolution.kind
        )
        return SwitchResult(path=resolution.worktree.path, created=False)

    wt_path = Path(os.path.normpath(base_dir / token))
    prepare_worktree_parent(base_dir, wt_path)

    if ctx.git.branch_exists(ctx.cwd, token):
        if start_point:
            logger.debug("branch %r exists, ignoring start point %r", token, start_point)
        ctx.git.add_worktree(ctx.cwd, wt_path, branch=token, create_branch=False, start_point=None)
    else:
        ctx.git.add_worktree(
            ctx.cwd, wt_path, branch=token, create_branch=True, start_point=start_point
        )

    src_root = ctx.git.get_worktree_root(ctx.cwd) or repo.main_root
    options = copy_options_from_config(config, exclude_dirs_for(src_root, base_dir))
    copied = copy_files(ctx.git, src_root, wt_path, options)
    if copied:
        logger.debug("copied %d file(s) into %s", len(copied), wt_path)

    try:
        ctx.hooks.run_hooks(config.hooks, wt_path)
    except HookError as e:
        printed = emitted_path(ctx, config, wt_path)
        raise HookError(e.command, e.exit_code, worktree_path=printed) from e

    return SwitchResult(path=wt_path, created=True)


def emitted_path(ctx: WtContext, config: WtConfig, path: Path) -> Path:
    """Apply relative output: keep the caller's subdirectory when it exists there."""
    if not config.relative:
        return path
    prefix = ctx.git.get_show_prefix(ctx.cwd)
    if not prefix:
        return path
    candidate = path / prefix
    if candidate.is_dir():
        return candidate
    return path


def should_change_directory(config: WtConfig, result: SwitchResult) -> bool:
    """Whether wt.nocd lets the shell wrapper cd into the result."""
    if config.nocd is NoCdMode.ALWAYS:
        return False
    if config.nocd is NoCdMode.CREATE and result.created:
        return False
    return True


def delete_worktrees(
    ctx: WtContext,
    config: WtConfig,
    tokens: Iterable[str],
    *,
    force: bool,
) -> DeleteResult:
    """Delete the worktree (and branch) named by each token, in order.

    Duplicate tokens are processed once. Processing stops at the first error;
    deletions already performed are kept.

    Raises:
        UnsupportedRepositoryError: In a bare repository
        SafetyError: Dirty worktree without force, default branch without override,
            or the main working tree
        ResolveError: A token matches neither a worktree nor a local branch
        GitCommandError: git refused to remove a worktree or a worktree-less branch
        HookError: A delete hook or the custom remover failed
    """
    repo = ctx.repo_context()
    ensure_not_bare(repo)
    main_root = repo.main_root
    current = ctx.git.get_worktree_root(ctx.cwd)
    default_branch = ctx.git.get_default_branch(main_root)
    base_dir = expand_base_dir(config.base_dir, main_root)

    removed_current = False
    for token in dict.fromkeys(tokens):
        worktrees = ctx.git.list_worktrees(main_root)
        resolution = resolve_worktree(worktrees, token, base_dir, ctx.cwd)

        if isinstance(resolution, WorktreeMatch):
            wt = resolution.worktree
            if wt.path == main_root or wt.path == worktrees[0].path:
                _refuse_main_worktree(config, wt, default_branch)
            is_current = current is not None and wt.path == current
            _delete_worktree(
                ctx,
                config,
                wt,
                force=force,
                main_root=main_root,
                base_dir=base_dir,
                default_branch=default_branch,
            )
            removed_current = removed_current or is_current
            continue

        if ctx.git.local_branch_exists(main_root, token):
            _guard_default_branch(config, token, default_branch)
            ctx.git.delete_branch(main_root, token, force=force)
            machine_output(f'Deleted branch "{token}" (no worktree was associated)')
            continue

        raise ResolveError(token)

    return DeleteResult(main_root=main_root, removed_current=removed_current)


def _guard_default_branch(config: WtConfig, branch: str, default_branch: str | None) -> None:
    if config.allow_delete_default:
        return
    if default_branch is not None and branch == default_branch:
        raise SafetyError(
            f'cannot delete default branch "{branch}": use --allow-delete-default to override'
        )


def _refuse_main_worktree(config: WtConfig, wt: WorktreeInfo, default_branch: str | None) -> None:
    # git cannot remove the main working tree; refuse before any hook runs.
    if wt.branch in ("", DETACHED_BRANCH):
        raise SafetyError(f'"{wt.path}" is the main working tree and cannot be deleted')
    _guard_default_branch(config, wt.branch, default_branch)
    raise SafetyError(
        f'branch "{wt.branch}" is checked out in the main working tree and cannot be deleted'
    )


def _delete_worktree(
    ctx: WtContext,
    config: WtConfig,
    wt: WorktreeInfo,
    *,
    force: bool,
    main_root: Path,
    base_dir: Path,
    default_branch: str | None,
) -> None:
    dir_name = relative_to_base(base_dir, wt.path) or str(wt.path)
    branch = wt.branch
    has_local_branch = (
        branch not in ("", DETACHED_BRANCH) and ctx.git.local_branch_exists(main_root, branch)
    )
    is_default = has_local_branch and default_branch is not None and branch == default_branch

    if not force and wt.path.is_dir() and ctx.git.has_uncommitted_changes(wt.path):
        raise SafetyError(
            f'worktree "{dir_name}" has modified or untracked files '
            "(use -D to force deletion)"
        )

    if config.delete_hooks:
        ctx.hooks.run_hooks(config.delete_hooks, wt.path)

    if config.remover:
        ctx.hooks.run_remover(config.remover, wt.path, main_root)
        ctx.git.prune_worktrees(main_root)
    else:
        ctx.git.remove_worktree(main_root, wt.path, force=force)

    if branch == DETACHED_BRANCH:
        machine_output(f'Deleted worktree "{dir_name}" (detached HEAD, no branch to delete)')
        return
    if not has_local_branch:
        machine_output(f'Deleted worktree "{dir_name}" (branch "{branch}" did not exist locally)')
        return
    if is_default and not config.allow_delete_default:
        if dir_name == branch:
            machine_output(f'Deleted worktree "{dir_name}" (branch is default, not deleted)')
        else:
            machine_output(
                f'Deleted worktree "{dir_name}" (branch "{branch}" is default, not deleted)'
            )
        return

    try:
        ctx.git.delete_branch(main_root, branch, force=force)
    except GitCommandError as e:
        logger.debug("branch deletion failed: %s", e)
        if dir_name == branch:
            user_output(
                f'Deleted worktree, but failed to delete branch "{branch}" (use -D to force)'
            )
        else:
            user_output(
                f'Deleted worktree "{dir_name}", but failed to delete branch "{branch}" '
                "(use -D to force)"
            )
        return

    if dir_name == branch:
        machine_output(f'Deleted worktree and branch "{branch}"')
    else:
        machine_output(f'Deleted worktree "{dir_name}" and branch "{branch}"')


def list_entries(ctx: WtContext) -> list[ListEntry]:
    """Worktrees in git's order, flagging the one containing the working directory."""
    repo = ctx.repo_context()
    current = ctx.git.get_worktree_root(ctx.cwd)
    if current is None and repo.bare:
        current = repo.main_root

    return [
        ListEntry(
            path=wt.path,
            branch=wt.branch,
            head=wt.head,
            bare=wt.bare,
            current=current is not None and wt.path == current,
        )
        for wt in ctx.git.list_worktrees(ctx.cwd)
    ]
