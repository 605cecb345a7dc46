"""Create, switch to and delete git worktrees with a single command."""
