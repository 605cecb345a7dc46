import logging
import os

import click
from click.core import ParameterSource

from git_wt.cli.commands.delete_cmd import run_delete
from git_wt.cli.commands.init_cmd import run_init
from git_wt.cli.commands.list_cmd import run_list
from git_wt.cli.commands.switch_cmd import run_switch
from git_wt.cli.completions import complete_args
from git_wt.cli.ensure import Ensure, wt_error_boundary
from git_wt.core.config import ConfigOverrides, apply_overrides, load_config
from git_wt.core.context import WtContext, create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"], max_content_width=120)

PROG_NAME = "git wt"
COMPLETE_VAR = "_GIT_WT_COMPLETE"
DEBUG_ENV = "GIT_WT_DEBUG"


def _given(ctx: click.Context, name: str) -> bool:
    return ctx.get_parameter_source(name) is ParameterSource.COMMANDLINE


def _overrides_from_flags(ctx: click.Context) -> ConfigOverrides:
    """Collect only the override flags the user typed."""
    params = ctx.params

    def multi(name: str) -> tuple[str, ...] | None:
        return tuple(params[name]) if _given(ctx, name) else None

    return ConfigOverrides(
        base_dir=params["basedir"] if _given(ctx, "basedir") else None,
        copy_ignored=params["copyignored"] if _given(ctx, "copyignored") else None,
        copy_untracked=params["copyuntracked"] if _given(ctx, "copyuntracked") else None,
        copy_modified=params["copymodified"] if _given(ctx, "copymodified") else None,
        no_copy=multi("nocopy"),
        copy=multi("copy_patterns"),
        hooks=multi("hooks"),
        delete_hooks=multi("delete_hooks"),
        remover=params["remover"] if _given(ctx, "remover") else None,
        relative=params["relative"] if _given(ctx, "relative") else None,
        allow_delete_default=True if _given(ctx, "allow_delete_default") else None,
    )


@click.command(PROG_NAME, context_settings=CONTEXT_SETTINGS)
@click.argument(
    "args",
    nargs=-1,
    metavar="[BRANCH|WORKTREE|PATH] [START-POINT]",
    shell_complete=complete_args,
)
@click.option(
    "-d", "--delete", is_flag=True, help="Delete worktree and branch (refuses dirty worktrees)."
)
@click.option("-D", "--force-delete", is_flag=True, help="Force delete worktree and branch.")
@click.option(
    "--init",
    "init_shell",
    metavar="SHELL",
    help="Print shell integration for bash, zsh, fish or powershell.",
)
@click.option(
    "--nocd",
    is_flag=True,
    help="With --init, omit the cd wrapper. Otherwise print the path instead of changing to it.",
)
@click.option("--json", "json_output", is_flag=True, help="List worktrees as JSON.")
@click.option("--basedir", metavar="DIR", help="Worktree base directory (wt.basedir).")
@click.option(
    "--copyignored/--no-copyignored",
    default=False,
    help="Copy files ignored by .gitignore (wt.copyignored).",
)
@click.option(
    "--copyuntracked/--no-copyuntracked",
    default=False,
    help="Copy untracked files (wt.copyuntracked).",
)
@click.option(
    "--copymodified/--no-copymodified",
    default=False,
    help="Copy modified tracked files (wt.copymodified).",
)
@click.option(
    "--nocopy",
    multiple=True,
    metavar="PATTERN",
    help="Gitignore-style pattern never copied; repeatable (wt.nocopy).",
)
@click.option(
    "--copy",
    "copy_patterns",
    multiple=True,
    metavar="PATTERN",
    help="Gitignore-style pattern of ignored files to copy; repeatable (wt.copy).",
)
@click.option(
    "--hook",
    "hooks",
    multiple=True,
    metavar="COMMAND",
    help="Command run in a new worktree; repeatable (wt.hook).",
)
@click.option(
    "--deletehook",
    "delete_hooks",
    multiple=True,
    metavar="COMMAND",
    help="Command run in a worktree before deletion; repeatable (wt.deletehook).",
)
@click.option("--remover", metavar="COMMAND", help="Command used to remove worktrees (wt.remover).")
@click.option(
    "--relative/--no-relative",
    default=False,
    help="Keep the current subdirectory when switching (wt.relative).",
)
@click.option(
    "--allow-delete-default",
    is_flag=True,
    help="Allow deleting the default branch.",
)
@click.version_option(package_name="git-wt")
@click.pass_context
@wt_error_boundary
def cli(
    ctx: click.Context,
    args: tuple[str, ...],
    delete: bool,
    force_delete: bool,
    init_shell: str | None,
    nocd: bool,
    json_output: bool,
    **_overrides: object,
) -> None:
    """Create, switch to and delete git worktrees.

    \b
    git wt                      list worktrees
    git wt <branch>             switch to the worktree for <branch>, creating it if needed
    git wt <branch> <start>     create <branch> from <start> when it does not exist
    git wt -d <branch>...       delete worktrees and their branches
    """
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()
    wt_ctx: WtContext = ctx.obj

    if init_shell is not None:
        run_init(init_shell, nocd=nocd)
        return

    if not args:
        Ensure.invariant(
            not (delete or force_delete), "-d/-D requires at least one branch or worktree"
        )
        run_list(wt_ctx, json_output=json_output)
        return

    config = apply_overrides(load_config(wt_ctx.git, wt_ctx.cwd), _overrides_from_flags(ctx))

    if delete or force_delete:
        run_delete(wt_ctx, config, args, force=force_delete)
        return

    run_switch(wt_ctx, config, args)


def main() -> None:
    """CLI entry point used by the `git-wt` console script."""
    if os.getenv(DEBUG_ENV):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
    cli(prog_name=PROG_NAME, complete_var=COMPLETE_VAR)
