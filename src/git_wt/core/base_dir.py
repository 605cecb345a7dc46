"""Worktree base directory: template expansion, legacy check, initialisation."""

import logging
import os
from pathlib import Path

from git_wt.core.config import WtConfig
from git_wt.core.errors import FilesystemError, LegacyPathError

logger = logging.getLogger(__name__)

REPO_NAME_VARIABLE = "{repo-name}"
LEGACY_BASE_DIR = "../{repo-name}-wt"

GITIGNORE_CONTENT = "*\n"

README_CONTENT = """# Git worktrees added by `git wt`

This directory contains Git worktrees created with `git wt`.

- Do NOT edit files here from parent directory contexts.
- Each subdirectory is an independent Git worktree and should be opened
  and operated on directly.
- Depending on your configuration, this directory may be placed under a Git repository.
  A `.gitignore` file ensures everything under it is ignored in that case.
"""


def expand_base_dir(template: str, main_root: Path) -> Path:
    """Expand a base-dir template into a normalised absolute path.

    ``{repo-name}`` becomes the basename of the main repository root, a
    leading ``~/`` becomes the home directory, and relative paths are joined
    with the main repository root.

    Example:
        >>> expand_base_dir("../{repo-name}-wt", Path("/src/app"))
        PosixPath('/src/app-wt')
    """
    expanded = template.replace(REPO_NAME_VARIABLE, main_root.name)
    if expanded == "~":
        path = Path.home()
    elif expanded.startswith("~/"):
        path = Path.home() / expanded[2:]
    else:
        path = Path(expanded)
        if not path.is_absolute():
            path = main_root / path
    return Path(os.path.normpath(path))


def check_legacy_base_dir(config: WtConfig, main_root: Path) -> None:
    """Fail when the historical default directory exists and wt.basedir is unset.

    Raises:
        LegacyPathError: With instructions to configure or remove the directory
    """
    if config.base_dir_configured:
        return
    legacy_dir = expand_base_dir(LEGACY_BASE_DIR, main_root)
    if legacy_dir.is_dir():
        raise LegacyPathError(legacy_dir)


def prepare_worktree_parent(base_dir: Path, worktree_path: Path) -> None:
    """Create the parent directory of a new worktree.

    When the base directory did not exist yet it receives a ``.gitignore``
    (``*``) and a README. Existing files are never overwritten.

    Raises:
        FilesystemError: If a directory or file cannot be written
    """
    base_dir_existed = base_dir.is_dir()
    try:
        worktree_path.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
        base_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"failed to create directory {worktree_path.parent}: {e}") from e

    if base_dir_existed:
        return

    logger.debug("initialising base directory %s", base_dir)
    for name, content in ((".gitignore", GITIGNORE_CONTENT), ("README.md", README_CONTENT)):
        target = base_dir / name
        if target.exists():
            continue
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"failed to create {target}: {e}") from e
