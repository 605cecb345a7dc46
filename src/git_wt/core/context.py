"""Application context with dependency injection."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from git_wt.core.git.abc import Git
from git_wt.core.git.real import RealGit
from git_wt.core.hooks import HookRunner, RealHookRunner
from git_wt.core.repo_context import RepoContext, RepoContextDetector

SHELL_INTEGRATION_ENV = "GIT_WT_SHELL_INTEGRATION"


@dataclass(frozen=True)
class WtContext:
    """Immutable context holding all dependencies for git-wt operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: Git
    hooks: HookRunner
    repo_detector: RepoContextDetector
    cwd: Path  # Current working directory at CLI invocation
    shell_integration: bool  # GIT_WT_SHELL_INTEGRATION=1 set by the shell wrapper

    def repo_context(self) -> RepoContext:
        return self.repo_detector.detect(self.cwd)


def shell_integration_active(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get(SHELL_INTEGRATION_ENV) == "1"


def create_context() -> WtContext:
    """Create production context with real implementations.

    Example:
        >>> ctx = create_context()
        >>> worktrees = ctx.git.list_worktrees(ctx.cwd)
    """
    git: Git = RealGit()
    return WtContext(
        git=git,
        hooks=RealHookRunner(),
        repo_detector=RepoContextDetector(git),
        cwd=Path.cwd(),
        shell_integration=shell_integration_active(),
    )
