"""Tests for shell completion candidates."""

from pathlib import Path

from click.shell_completion import ShellComplete

from git_wt.cli.cli import COMPLETE_VAR, PROG_NAME, cli
from git_wt.cli.completions import start_point_candidates, token_candidates, truncate
from git_wt.core.context import WtContext
from git_wt.core.git.abc import DETACHED_BRANCH, WorktreeInfo
from tests.fakes.context import create_test_context
from tests.fakes.git import FakeGit

MAIN = WorktreeInfo(path=Path("/repo"), branch="main", head="1111111")
FEATURE = WorktreeInfo(path=Path("/repo/.wt/feature/login"), branch="feature/login", head="2222222")
RENAMED = WorktreeInfo(path=Path("/repo/.wt/api"), branch="fix-api", head="3333333")
DETACHED = WorktreeInfo(path=Path("/repo/.wt/probe"), branch=DETACHED_BRANCH, head="4444444")


def _context() -> WtContext:
    git = FakeGit(
        worktrees=[MAIN, FEATURE, RENAMED, DETACHED],
        local_branches=["main", "feature/login", "fix-api", "old-topic"],
        remote_branches=["origin/main", "origin/release"],
        commit_messages={
            "main": "Initial commit",
            "feature/login": "Add login form",
            "fix-api": "Handle timeouts in the API client when the upstream is slow",
            "old-topic": "Experiment",
            "origin/release": "Release 1.0",
        },
    )
    return create_test_context(git=git, cwd=Path("/repo"))


def _complete(args: list[str], incomplete: str) -> list[tuple[str, str | None]]:
    completer = ShellComplete(cli, {"obj": _context()}, PROG_NAME, COMPLETE_VAR)
    return [(item.value, item.help) for item in completer.get_completions(args, incomplete)]


def test_truncate_short_text_unchanged() -> None:
    assert truncate("short") == "short"


def test_truncate_long_text() -> None:
    """Test that long text is cut to the limit including the ellipsis."""
    result = truncate("x" * 50)

    assert len(result) == 40
    assert result.endswith("...")


def test_token_candidates() -> None:
    """Test worktree branches, directory names and local branches with labels."""
    assert token_candidates(_context()) == [
        ("main", "[branch: worktree=/repo] Initial commit"),
        ("feature/login", "[worktree: branch=feature/login] Add login form"),
        ("fix-api", "[branch: worktree=api] Handle timeouts in the API client whe..."),
        ("api", "[worktree: branch=fix-api] Handle timeouts in the API client whe..."),
        ("probe", "[worktree: branch=detached]"),
        ("old-topic", "[branch] Experiment"),
    ]


def test_start_point_candidates() -> None:
    """Test that local branches come first, then remote-tracking branches."""
    assert start_point_candidates(_context()) == [
        ("main", "[branch] Initial commit"),
        ("feature/login", "[branch] Add login form"),
        ("fix-api", "[branch] Handle timeouts in the API client whe..."),
        ("old-topic", "[branch] Experiment"),
        ("origin/main", "[remote]"),
        ("origin/release", "[remote] Release 1.0"),
    ]


def test_complete_first_argument_filters_by_prefix() -> None:
    names = [name for name, _ in _complete([], "f")]

    assert names == ["feature/login", "fix-api"]


def test_complete_second_argument_offers_start_points() -> None:
    names = [name for name, _ in _complete(["new-branch"], "origin/")]

    assert names == ["origin/main", "origin/release"]


def test_complete_third_argument_offers_nothing() -> None:
    assert _complete(["a", "b"], "") == []


def test_complete_delete_offers_tokens_for_every_position() -> None:
    names = [name for name, _ in _complete(["-d", "api"], "")]

    assert "probe" in names
    assert "origin/release" not in names


def test_complete_outside_repository_offers_nothing() -> None:
    completer = ShellComplete(
        cli, {"obj": create_test_context(cwd=Path("/tmp"))}, PROG_NAME, COMPLETE_VAR
    )

    assert completer.get_completions([], "") == []
