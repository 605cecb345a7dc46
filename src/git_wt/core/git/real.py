"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import subprocess
from pathlib import Path

from git_wt.cli.output import user_output
from git_wt.core.errors import GitCommandError
from git_wt.core.git.abc import DETACHED_BRANCH, Git, GitDirs, WorktreeInfo
from git_wt.core.subprocess import run_subprocess_with_context

SHORT_HEAD_LENGTH = 7


def parse_worktree_porcelain(output: str) -> list[WorktreeInfo]:
    """Parse `git worktree list --porcelain` output.

    Records are separated by blank lines and keep git's order, which lists the
    main working tree (or bare root) first.
    """
    worktrees: list[WorktreeInfo] = []
    current_path: Path | None = None
    current_branch = ""
    current_head = ""
    current_bare = False

    def flush() -> None:
        if current_path is None:
            return
        branch = current_branch
        if not branch and not current_bare:
            branch = DETACHED_BRANCH
        worktrees.append(
            WorktreeInfo(path=current_path, branch=branch, head=current_head, bare=current_bare)
        )

    for raw_line in output.splitlines():
        line = raw_line.strip()
        if line.startswith("worktree "):
            flush()
            current_path = Path(line.split(maxsplit=1)[1])
            current_branch = ""
            current_head = ""
            current_bare = False
        elif line.startswith("HEAD "):
            current_head = line.split(maxsplit=1)[1][:SHORT_HEAD_LENGTH]
        elif line.startswith("branch "):
            current_branch = line.split(maxsplit=1)[1].removeprefix("refs/heads/")
        elif line == "bare":
            current_bare = True
        elif line == "" and current_path is not None:
            flush()
            current_path = None

    flush()
    return worktrees


def parse_file_list(output: str) -> list[str]:
    """Split NUL-separated `ls-files -z` output, dropping anything under .git/.

    With -z, git prints names verbatim instead of C-quoting them.
    """
    files: list[str] = []
    for name in output.split("\0"):
        if not name:
            continue
        if name == ".git" or name.startswith(".git/"):
            continue
        files.append(name)
    return files


# ============================================================================
# Production Implementation
# ============================================================================


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def list_worktrees(self, cwd: Path) -> list[WorktreeInfo]:
        result = run_subprocess_with_context(
            ["git", "worktree", "list", "--porcelain"],
            operation_context="list worktrees",
            cwd=cwd,
        )
        return parse_worktree_porcelain(result.stdout)

    def list_local_branches(self, cwd: Path) -> list[str]:
        result = run_subprocess_with_context(
            ["git", "for-each-ref", "--format=%(refname:short)", "refs/heads/"],
            operation_context="list local branches",
            cwd=cwd,
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def list_remote_branches(self, cwd: Path) -> list[str]:
        result = run_subprocess_with_context(
            ["git", "for-each-ref", "--format=%(refname)", "refs/remotes/"],
            operation_context="list remote branches",
            cwd=cwd,
        )
        branches: list[str] = []
        for line in result.stdout.splitlines():
            ref = line.strip()
            if not ref or ref.endswith("/HEAD"):
                continue
            branches.append(ref.removeprefix("refs/remotes/"))
        return branches

    def branch_exists(self, cwd: Path, branch: str) -> bool:
        if self.local_branch_exists(cwd, branch):
            return True
        return self._ref_exists(cwd, f"refs/remotes/origin/{branch}")

    def local_branch_exists(self, cwd: Path, branch: str) -> bool:
        return self._ref_exists(cwd, f"refs/heads/{branch}")

    def _ref_exists(self, cwd: Path, ref: str) -> bool:
        result = subprocess.run(
            ["git", "show-ref", "--verify", "--quiet", ref],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        return result.returncode == 0

    def get_commit_message(self, cwd: Path, branch: str) -> str:
        result = subprocess.run(
            ["git", "log", "-1", "--format=%s", branch, "--"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return ""
        return result.stdout.strip()

    def get_default_branch(self, cwd: Path) -> str | None:
        result = subprocess.run(
            ["git", "symbolic-ref", "refs/remotes/origin/HEAD", "--short"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0:
            remote_head = result.stdout.strip()
            if remote_head:
                return remote_head.removeprefix("origin/")

        for candidate in ("main", "master"):
            if self.local_branch_exists(cwd, candidate):
                return candidate
        return None

    def get_git_dirs(self, cwd: Path) -> GitDirs | None:
        result = subprocess.run(
            ["git", "rev-parse", "--path-format=absolute", "--git-dir", "--git-common-dir"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        if len(lines) < 2:
            return None
        return GitDirs(git_dir=Path(lines[0]), common_dir=Path(lines[1]))

    def get_worktree_root(self, cwd: Path) -> Path | None:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        toplevel = result.stdout.strip()
        if not toplevel:
            return None
        return Path(toplevel)

    def get_show_prefix(self, cwd: Path) -> str:
        result = run_subprocess_with_context(
            ["git", "rev-parse", "--show-prefix"],
            operation_context="get path relative to worktree root",
            cwd=cwd,
        )
        return result.stdout.strip().rstrip("/")

    def add_worktree(
        self,
        cwd: Path,
        path: Path,
        *,
        branch: str,
        create_branch: bool,
        start_point: str | None,
    ) -> None:
        if create_branch:
            cmd = ["git", "worktree", "add", "-b", branch, str(path)]
            if start_point:
                cmd.append(start_point)
            context = f"add worktree with new branch '{branch}' at {path}"
        else:
            cmd = ["git", "worktree", "add", str(path), branch]
            context = f"add worktree for branch '{branch}' at {path}"

        result = run_subprocess_with_context(cmd, operation_context=context, cwd=cwd)
        # stdout belongs to the shell wrapper; git's chatter goes to stderr.
        for stream in (result.stdout, result.stderr):
            if stream and stream.strip():
                user_output(stream.rstrip("\n"))

    def remove_worktree(self, cwd: Path, path: Path, *, force: bool) -> None:
        cmd = ["git", "worktree", "remove"]
        if force:
            cmd.append("--force")
        cmd.append(str(path))
        run_subprocess_with_context(
            cmd,
            operation_context=f"remove worktree at {path}",
            cwd=cwd,
        )

    def delete_branch(self, cwd: Path, branch: str, *, force: bool) -> None:
        flag = "-D" if force else "-d"
        run_subprocess_with_context(
            ["git", "branch", flag, branch],
            operation_context=f"delete branch '{branch}'",
            cwd=cwd,
        )

    def prune_worktrees(self, cwd: Path) -> None:
        run_subprocess_with_context(
            ["git", "worktree", "prune"],
            operation_context="prune worktree metadata",
            cwd=cwd,
        )

    def get_config(self, cwd: Path, key: str) -> str | None:
        values = self._read_config(cwd, ["--get", key], key)
        if values is None:
            return None
        return values.strip()

    def get_config_all(self, cwd: Path, key: str) -> list[str]:
        values = self._read_config(cwd, ["--get-all", key], key)
        if values is None:
            return []
        return [line for line in values.splitlines() if line.strip()]

    def _read_config(self, cwd: Path, args: list[str], key: str) -> str | None:
        cmd = ["git", "config", *args]
        result = run_subprocess_with_context(
            cmd,
            operation_context=f"read config '{key}'",
            cwd=cwd,
            check=False,
        )
        # Exit code 1 means the key is not set.
        if result.returncode == 1:
            return None
        if result.returncode != 0:
            raise GitCommandError(
                cmd,
                result.returncode,
                result.stderr or "",
                f"read config '{key}'",
            )
        return result.stdout

    def set_config(self, cwd: Path, key: str, value: str) -> None:
        run_subprocess_with_context(
            ["git", "config", key, value],
            operation_context=f"set config '{key}'",
            cwd=cwd,
        )

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        result = run_subprocess_with_context(
            ["git", "status", "--porcelain"],
            operation_context="check worktree status",
            cwd=cwd,
        )
        return bool(result.stdout.strip())

    def list_ignored_files(self, cwd: Path) -> list[str]:
        return self._ls_files(cwd, ["--others", "--ignored", "--exclude-standard"], "ignored")

    def list_untracked_files(self, cwd: Path) -> list[str]:
        return self._ls_files(cwd, ["--others", "--exclude-standard"], "untracked")

    def list_modified_files(self, cwd: Path) -> list[str]:
        return self._ls_files(cwd, ["--modified"], "modified")

    def _ls_files(self, cwd: Path, flags: list[str], category: str) -> list[str]:
        result = run_subprocess_with_context(
            ["git", "ls-files", "-z", *flags],
            operation_context=f"list {category} files",
            cwd=cwd,
        )
        return parse_file_list(result.stdout)
