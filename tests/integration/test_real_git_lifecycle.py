"""End-to-end lifecycle tests against a real git executable.

Each test builds a fresh repository with one commit on main and drives the
CLI through CliRunner with a context wired to RealGit and RealHookRunner.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from git_wt.cli.cli import cli
from tests.test_utils.git_repo import commit_file, init_test_repo, real_context, run_git

pytestmark = pytest.mark.integration


def _wt(cwd: Path, *args: str, shell_integration: bool = False) -> Result:
    ctx = real_context(cwd, shell_integration=shell_integration)
    return CliRunner().invoke(cli, list(args), obj=ctx)


def _list_json(cwd: Path) -> list[dict[str, object]]:
    result = _wt(cwd, "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_create_new_branch(tmp_path: Path) -> None:
    """Test that a new branch gets a worktree under .wt and shows up in the list."""
    repo = init_test_repo(tmp_path)

    result = _wt(repo, "feature")

    wt_path = repo / ".wt" / "feature"
    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines()[-1] == str(wt_path)
    assert wt_path.is_dir()
    assert run_git(repo, "branch", "--list", "feature") != ""
    entries = _list_json(repo)
    assert [entry["branch"] for entry in entries] == ["main", "feature"]
    assert (repo / ".wt" / ".gitignore").read_text(encoding="utf-8") == "*\n"
    assert run_git(repo, "status", "--porcelain") == ""


def test_switch_to_existing_worktree(tmp_path: Path) -> None:
    """Test that a second invocation returns the same path without running hooks."""
    repo = init_test_repo(tmp_path)
    assert _wt(repo, "feature").exit_code == 0

    result = _wt(repo, "--hook", "touch hook-ran", "feature")

    wt_path = repo / ".wt" / "feature"
    assert result.exit_code == 0, result.output
    assert result.stdout == f"{wt_path}\n"
    assert not (wt_path / "hook-ran").exists()


def test_create_from_start_point(tmp_path: Path) -> None:
    repo = init_test_repo(tmp_path)
    run_git(repo, "checkout", "-b", "work")
    commit_file(repo, "work.txt", "work\n", "Work in progress")

    result = _wt(repo, "hotfix", "main")

    assert result.exit_code == 0, result.output
    assert (repo / ".wt" / "hotfix").is_dir()
    assert run_git(repo, "rev-parse", "hotfix") == run_git(repo, "rev-parse", "main")
    assert not (repo / ".wt" / "hotfix" / "work.txt").exists()


def test_hooks_run_in_new_worktree(tmp_path: Path) -> None:
    repo = init_test_repo(tmp_path)
    run_git(repo, "config", "--add", "wt.hook", "echo created > hook.txt")

    result = _wt(repo, "feature")

    assert result.exit_code == 0, result.output
    hook_file = repo / ".wt" / "feature" / "hook.txt"
    assert hook_file.read_text(encoding="utf-8") == "created\n"
    assert "hook.txt" not in result.stdout


def test_copy_ignored_files(tmp_path: Path) -> None:
    """Test that ignored files are copied while wt.nocopy patterns are skipped."""
    repo = init_test_repo(tmp_path)
    commit_file(repo, ".gitignore", ".env\n*.log\n", "Ignore local files")
    (repo / ".env").write_text("TOKEN=abc\n", encoding="utf-8")
    (repo / "debug.log").write_text("noise\n", encoding="utf-8")
    run_git(repo, "config", "wt.copyignored", "true")
    run_git(repo, "config", "--add", "wt.nocopy", "*.log")

    result = _wt(repo, "feature")

    wt_path = repo / ".wt" / "feature"
    assert result.exit_code == 0, result.output
    assert (wt_path / ".env").read_text(encoding="utf-8") == "TOKEN=abc\n"
    assert not (wt_path / "debug.log").exists()


def test_copy_ignored_files_with_unusual_names(tmp_path: Path) -> None:
    repo = init_test_repo(tmp_path)
    commit_file(repo, ".gitignore", "*.env\n", "Ignore env files")
    (repo / "café.env").write_text("A=1\n", encoding="utf-8")
    (repo / 'a"b.env').write_text("B=2\n", encoding="utf-8")

    result = _wt(repo, "--copyignored", "feature")

    wt_path = repo / ".wt" / "feature"
    assert result.exit_code == 0, result.output
    assert (wt_path / "café.env").read_text(encoding="utf-8") == "A=1\n"
    assert (wt_path / 'a"b.env').read_text(encoding="utf-8") == "B=2\n"


def test_safe_delete_refuses_dirty_worktree(tmp_path: Path) -> None:
    repo = init_test_repo(tmp_path)
    assert _wt(repo, "feature").exit_code == 0
    wt_path = repo / ".wt" / "feature"
    (wt_path / "new.txt").write_text("draft\n", encoding="utf-8")

    result = _wt(repo, "-d", "feature")

    assert result.exit_code != 0
    assert "-D" in result.stderr
    assert wt_path.is_dir()


def test_safe_delete_removes_worktree_and_merged_branch(tmp_path: Path) -> None:
    repo = init_test_repo(tmp_path)
    assert _wt(repo, "feature").exit_code == 0

    result = _wt(repo, "-d", "feature")

    assert result.exit_code == 0, result.output
    assert result.stdout == 'Deleted worktree and branch "feature"\n'
    assert not (repo / ".wt" / "feature").exists()
    assert run_git(repo, "branch", "--list", "feature") == ""
    assert [entry["branch"] for entry in _list_json(repo)] == ["main"]


def test_default_branch_protection(tmp_path: Path) -> None:
    """Test that the default branch needs --allow-delete-default."""
    repo = init_test_repo(tmp_path)
    run_git(repo, "checkout", "-b", "other")

    refused = _wt(repo, "-D", "main")

    assert refused.exit_code != 0
    assert "--allow-delete-default" in refused.stderr
    assert run_git(repo, "branch", "--list", "main") != ""

    allowed = _wt(repo, "-D", "--allow-delete-default", "main")

    assert allowed.exit_code == 0, allowed.output
    assert run_git(repo, "branch", "--list", "main") == ""


def test_default_branch_checked_out_in_main_worktree(tmp_path: Path) -> None:
    """Test that -D on the main tree's default branch is refused before any hook runs."""
    repo = init_test_repo(tmp_path)

    result = _wt(repo, "-D", "--deletehook", "touch delete-hook-ran", "main")

    assert result.exit_code != 0
    assert "--allow-delete-default" in result.stderr
    assert not (repo / "delete-hook-ran").exists()
    assert run_git(repo, "branch", "--list", "main") != ""
    assert [entry["branch"] for entry in _list_json(repo)] == ["main"]


def test_delete_current_worktree_with_shell_integration(tmp_path: Path) -> None:
    repo = init_test_repo(tmp_path)
    assert _wt(repo, "feature").exit_code == 0
    wt_path = repo / ".wt" / "feature"

    result = _wt(wt_path, "-D", "feature", shell_integration=True)

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines()[-1] == str(repo)
    assert not wt_path.exists()


def test_json_matches_table(tmp_path: Path) -> None:
    """Test that each table row has a JSON element with the same values."""
    repo = init_test_repo(tmp_path)
    assert _wt(repo, "feature").exit_code == 0

    entries = _list_json(repo / ".wt" / "feature")
    table = _wt(repo / ".wt" / "feature")

    assert table.exit_code == 0, table.output
    rows = table.stdout.splitlines()[1:]
    assert len(rows) == len(entries)
    for row, entry in zip(rows, entries, strict=True):
        current = row.lstrip().startswith("*")
        columns = row.replace("*", " ", 1).split()
        assert columns == [entry["path"], entry["branch"], entry["head"]]
        assert current is entry["current"]
    assert [entry["current"] for entry in entries] == [False, True]


def test_bare_repository_rejected_for_create(tmp_path: Path) -> None:
    source = init_test_repo(tmp_path)
    bare = tmp_path.resolve() / "bare.git"
    run_git(tmp_path, "clone", "--bare", str(source), str(bare))

    result = _wt(bare, "feature")

    assert result.exit_code == 1
    assert "bare repositories are not currently supported" in result.stderr
    listed = _list_json(bare)
    assert listed[0]["bare"] is True
