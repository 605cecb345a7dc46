"""Tests for list mode: `git wt` and `git wt --json`."""

import json
from pathlib import Path

from click.testing import CliRunner

from git_wt.cli.cli import cli
from git_wt.core.git.abc import DETACHED_BRANCH, WorktreeInfo
from tests.fakes.context import create_test_context
from tests.fakes.git import FakeGit

MAIN = WorktreeInfo(path=Path("/repo"), branch="main", head="1111111")
FEATURE = WorktreeInfo(path=Path("/repo/.wt/feature"), branch="feature", head="2222222")
DETACHED = WorktreeInfo(path=Path("/repo/.wt/scratch"), branch=DETACHED_BRANCH, head="3333333")


def test_list_table() -> None:
    """Test that every worktree appears with the current one marked."""
    git = FakeGit(worktrees=[MAIN, FEATURE, DETACHED])
    ctx = create_test_context(git=git, cwd=Path("/repo/.wt/feature/src"))

    result = CliRunner().invoke(cli, [], obj=ctx)

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert "PATH" in lines[0]
    assert "BRANCH" in lines[0]
    assert "HEAD" in lines[0]
    assert len(lines) == 4
    assert "/repo " in lines[1] and "main" in lines[1] and "1111111" in lines[1]
    assert lines[2].lstrip().startswith("*")
    assert "/repo/.wt/feature" in lines[2]
    assert not lines[1].lstrip().startswith("*")
    assert DETACHED_BRANCH in lines[3]


def test_list_json() -> None:
    git = FakeGit(worktrees=[MAIN, FEATURE, DETACHED])
    ctx = create_test_context(git=git, cwd=Path("/repo"))

    result = CliRunner().invoke(cli, ["--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data == [
        {"path": "/repo", "branch": "main", "head": "1111111", "bare": False, "current": True},
        {
            "path": "/repo/.wt/feature",
            "branch": "feature",
            "head": "2222222",
            "bare": False,
            "current": False,
        },
        {
            "path": "/repo/.wt/scratch",
            "branch": DETACHED_BRANCH,
            "head": "3333333",
            "bare": False,
            "current": False,
        },
    ]


def test_list_works_in_bare_repository() -> None:
    """Test that listing is allowed in a bare repository and marks the root current."""
    bare = WorktreeInfo(path=Path("/srv/repo.git"), branch="", head="", bare=True)
    linked = WorktreeInfo(path=Path("/srv/wt/a"), branch="a", head="4444444")
    ctx = create_test_context(git=FakeGit(worktrees=[bare, linked]), cwd=Path("/srv/repo.git"))

    result = CliRunner().invoke(cli, ["--json"], obj=ctx)

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data[0]["bare"] is True
    assert data[0]["current"] is True
    assert data[1]["current"] is False


def test_bare_root_labelled_in_table() -> None:
    bare = WorktreeInfo(path=Path("/srv/repo.git"), branch="", head="", bare=True)
    ctx = create_test_context(git=FakeGit(worktrees=[bare]), cwd=Path("/srv/repo.git"))

    result = CliRunner().invoke(cli, [], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "(bare)" in result.stdout


def test_list_outside_repository() -> None:
    result = CliRunner().invoke(cli, [], obj=create_test_context(cwd=Path("/tmp")))

    assert result.exit_code == 1
    assert "not a git repository" in result.stderr


def test_table_keeps_bracketed_text_literal() -> None:
    """Test that brackets in paths and branch labels are printed as-is."""
    odd = WorktreeInfo(path=Path("/repo/.wt/[tmp]"), branch="fix/[bold]x", head="4444444")
    git = FakeGit(worktrees=[MAIN, odd, DETACHED])
    ctx = create_test_context(git=git, cwd=Path("/repo"))

    result = CliRunner().invoke(cli, [], obj=ctx)

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert "/repo/.wt/[tmp]" in lines[2]
    assert "fix/[bold]x" in lines[2]
    assert "[detached]" in lines[3]
