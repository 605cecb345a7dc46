"""Shell-init mode: `git wt --init <shell>`."""

from git_wt.cli.output import machine_output
from git_wt.cli.shell_integration.scripts import SHELL_SCRIPTS
from git_wt.core.errors import UsageError


def render_shell_init(shell: str, *, include_wrapper: bool) -> str:
    """Build the hook text for a shell.

    Raises:
        UsageError: If the shell is not supported
    """
    if shell not in SHELL_SCRIPTS:
        supported = ", ".join(SHELL_SCRIPTS)
        raise UsageError(f"unsupported shell: {shell} (supported: {supported})")

    display_name, wrapper, completion = SHELL_SCRIPTS[shell]
    parts = [f"# git-wt shell hook for {display_name}\n"]
    if include_wrapper:
        parts.append(wrapper)
    parts.append(completion)
    return "".join(parts)


def run_init(shell: str, *, nocd: bool) -> None:
    machine_output(render_shell_init(shell, include_wrapper=not nocd), nl=False)
