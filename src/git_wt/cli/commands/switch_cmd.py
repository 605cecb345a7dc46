"""Create-or-switch mode: `git wt <branch|worktree|path> [<start-point>]`."""

from git_wt.cli.ensure import Ensure
from git_wt.cli.output import machine_output, user_output
from git_wt.core.config import WtConfig
from git_wt.core.context import WtContext
from git_wt.core.lifecycle import create_or_switch, emitted_path, should_change_directory


def run_switch(ctx: WtContext, config: WtConfig, args: tuple[str, ...]) -> None:
    """Print the worktree path for args[0], creating the worktree first if needed.

    Under shell integration, when wt.nocd suppresses the directory change,
    the path goes to stderr so the wrapper stays put.
    """
    Ensure.invariant(
        len(args) <= 2,
        f"too many arguments: expected <branch> [<start-point>], got {len(args)} arguments",
    )
    token = args[0]
    Ensure.invariant(token.strip() != "", "branch or worktree name must not be empty")
    start_point = args[1] if len(args) == 2 else None

    result = create_or_switch(ctx, config, token, start_point)
    path = emitted_path(ctx, config, result.path)

    if ctx.shell_integration and not should_change_directory(config, result):
        user_output(str(path))
        return
    machine_output(str(path))
