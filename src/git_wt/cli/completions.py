"""Shell completion candidates for worktrees, branches and start points.

Served through click's completion protocol, which the snippets emitted by
`git wt --init` drive via the _GIT_WT_COMPLETE environment variable.
"""

import logging

import click
from click.shell_completion import CompletionItem

from git_wt.core.base_dir import expand_base_dir
from git_wt.core.config import load_config
from git_wt.core.context import WtContext, create_context
from git_wt.core.errors import WtError
from git_wt.core.git.abc import DETACHED_BRANCH
from git_wt.core.resolve import relative_to_base

logger = logging.getLogger(__name__)

DESCRIPTION_MESSAGE_LIMIT = 40


def truncate(text: str, limit: int = DESCRIPTION_MESSAGE_LIMIT) -> str:
    if len(text) <= limit:
        return text
    if limit <= 3:
        return text[:limit]
    return text[: limit - 3] + "..."


def _describe(label: str, message: str) -> str:
    if not message:
        return label
    return f"{label} {truncate(message)}"


def token_candidates(ctx: WtContext) -> list[tuple[str, str]]:
    """Worktree branches, worktree directory names and local branches with descriptions."""
    git = ctx.git
    repo = ctx.repo_context()
    config = load_config(git, ctx.cwd)
    base_dir = expand_base_dir(config.base_dir, repo.main_root)

    seen: set[str] = set()
    candidates: list[tuple[str, str]] = []

    for wt in git.list_worktrees(ctx.cwd):
        if wt.bare:
            continue
        dir_name = relative_to_base(base_dir, wt.path)
        has_branch = wt.branch not in ("", DETACHED_BRANCH)
        message = git.get_commit_message(ctx.cwd, wt.branch) if has_branch else ""

        if has_branch and wt.branch not in seen:
            seen.add(wt.branch)
            if dir_name == wt.branch:
                label = f"[worktree: branch={wt.branch}]"
            else:
                label = f"[branch: worktree={dir_name or wt.path}]"
            candidates.append((wt.branch, _describe(label, message)))

        if dir_name and dir_name not in seen:
            seen.add(dir_name)
            branch_info = wt.branch if has_branch else "detached"
            if dir_name == branch_info:
                label = f"[worktree: {dir_name}]"
            else:
                label = f"[worktree: branch={branch_info}]"
            candidates.append((dir_name, _describe(label, message)))

    for branch in git.list_local_branches(ctx.cwd):
        if branch in seen:
            continue
        seen.add(branch)
        candidates.append((branch, _describe("[branch]", git.get_commit_message(ctx.cwd, branch))))

    return candidates


def start_point_candidates(ctx: WtContext) -> list[tuple[str, str]]:
    """Local branches, then remote-tracking branches, with descriptions."""
    git = ctx.git
    seen: set[str] = set()
    candidates: list[tuple[str, str]] = []

    for branch in git.list_local_branches(ctx.cwd):
        if branch not in seen:
            seen.add(branch)
            message = git.get_commit_message(ctx.cwd, branch)
            candidates.append((branch, _describe("[branch]", message)))

    for branch in git.list_remote_branches(ctx.cwd):
        if branch not in seen:
            seen.add(branch)
            message = git.get_commit_message(ctx.cwd, branch)
            candidates.append((branch, _describe("[remote]", message)))

    return candidates


def complete_args(
    ctx: click.Context, param: click.Parameter, incomplete: str
) -> list[CompletionItem]:
    """Click shell_complete callback for the positional arguments."""
    wt_ctx = ctx.find_root().obj
    if not isinstance(wt_ctx, WtContext):
        wt_ctx = create_context()

    previous = ctx.params.get(param.name or "args") or ()
    deleting = bool(ctx.params.get("delete") or ctx.params.get("force_delete"))

    try:
        if deleting or len(previous) == 0:
            candidates = token_candidates(wt_ctx)
        elif len(previous) == 1:
            candidates = start_point_candidates(wt_ctx)
        else:
            candidates = []
    except WtError as e:
        logger.debug("completion unavailable: %s", e)
        return []

    return [
        CompletionItem(name, help=description)
        for name, description in candidates
        if name.startswith(incomplete)
    ]
