"""List mode: worktrees as a table or as JSON."""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from git_wt.cli.json_output import emit_json_list
from git_wt.cli.json_schemas import WorktreeListEntry
from git_wt.core.context import WtContext
from git_wt.core.lifecycle import ListEntry, list_entries

CURRENT_MARKER = "*"
BARE_BRANCH_LABEL = "(bare)"


def build_table(entries: list[ListEntry]) -> Table:
    table = Table(box=None, show_header=True, header_style="bold", pad_edge=False)
    table.add_column("", no_wrap=True)
    table.add_column("PATH", no_wrap=True)
    table.add_column("BRANCH", no_wrap=True)
    table.add_column("HEAD", no_wrap=True)

    for entry in entries:
        table.add_row(
            # Text cells: branch labels like "[detached]" must not parse as markup.
            Text(CURRENT_MARKER if entry.current else ""),
            Text(str(entry.path)),
            Text(BARE_BRANCH_LABEL if entry.bare else entry.branch),
            Text(entry.head),
        )
    return table


def _table_width(entries: list[ListEntry]) -> int:
    # Wide enough that rich never truncates a path.
    widest_path = max((len(str(e.path)) for e in entries), default=0)
    widest_branch = max((len(e.branch) for e in entries), default=0)
    return max(200, widest_path + widest_branch + 32)


def run_list(ctx: WtContext, *, json_output: bool) -> None:
    entries = list_entries(ctx)

    if json_output:
        emit_json_list(
            [
                WorktreeListEntry(
                    path=str(entry.path),
                    branch=entry.branch,
                    head=entry.head,
                    bare=entry.bare,
                    current=entry.current,
                )
                for entry in entries
            ]
        )
        return

    console = Console(width=_table_width(entries), highlight=False)
    console.print(build_table(entries))
