"""Delete mode: `git wt -d|-D <token>...`."""

from git_wt.cli.output import machine_output
from git_wt.core.config import WtConfig
from git_wt.core.context import WtContext
from git_wt.core.lifecycle import delete_worktrees


def run_delete(ctx: WtContext, config: WtConfig, tokens: tuple[str, ...], *, force: bool) -> None:
    result = delete_worktrees(ctx, config, tokens, force=force)
    # The wrapper cds to the last stdout line; send it back to the main tree.
    if result.removed_current and ctx.shell_integration:
        machine_output(str(result.main_root))
