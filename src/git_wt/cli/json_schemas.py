"""Pydantic models for JSON output schemas."""

from pydantic import BaseModel, ConfigDict


class WorktreeListEntry(BaseModel):
    """JSON schema for one element of `git wt --json`.

    Attributes:
        path: Absolute path to the worktree directory
        branch: Branch name, "[detached]", or empty for a bare root
        head: Seven-character commit prefix
        bare: Whether the entry is a bare repository root
        current: Whether the working directory is inside this worktree
    """

    model_config = ConfigDict(strict=True)

    path: str
    branch: str
    head: str
    bare: bool
    current: bool
