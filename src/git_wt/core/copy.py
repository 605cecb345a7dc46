"""Copy ignored, untracked and modified files into a new worktree.

Candidates come from git's own file listings; include (``wt.copy``) and
exclude (``wt.nocopy``) patterns use gitignore grammar via dulwich. Files are
copied one at a time, preferring a copy-on-write clone where the platform
offers one.
"""

import ctypes
import ctypes.util
import logging
import os
import shutil
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from dulwich.ignore import IgnoreFilter

from git_wt.core.config import WtConfig
from git_wt.core.git.abc import Git

logger = logging.getLogger(__name__)

# _IOW(0x94, 9, int) from linux/fs.h
FICLONE = 0x40049409

CLONE_SUPPORTED = sys.platform in ("darwin", "linux")


@dataclass(frozen=True)
class CopyOptions:
    """What to copy from the source worktree.

    Attributes:
        copy_ignored: Copy every file git ignores
        copy_untracked: Copy untracked, non-ignored files
        copy_modified: Copy tracked files with unstaged modifications
        no_copy: Gitignore-style patterns that are never copied
        copy: Gitignore-style patterns selecting ignored files to copy
        exclude_dirs: Absolute directories whose contents are never copied
    """

    copy_ignored: bool = False
    copy_untracked: bool = False
    copy_modified: bool = False
    no_copy: tuple[str, ...] = ()
    copy: tuple[str, ...] = ()
    exclude_dirs: tuple[Path, ...] = ()


def copy_options_from_config(config: WtConfig, exclude_dirs: tuple[Path, ...]) -> CopyOptions:
    return CopyOptions(
        copy_ignored=config.copy_ignored,
        copy_untracked=config.copy_untracked,
        copy_modified=config.copy_modified,
        no_copy=config.no_copy,
        copy=config.copy,
        exclude_dirs=exclude_dirs,
    )


def exclude_dirs_for(src_root: Path, base_dir: Path) -> tuple[Path, ...]:
    """Exclude the base directory unless the source itself lives inside it."""
    if src_root.is_relative_to(base_dir):
        return ()
    return (base_dir,)


class PatternMatcher:
    """Matches repository-relative paths against gitignore-style patterns.

    A path matches when it or one of its parent directories matches, so
    ``vendor/`` covers ``vendor/lib/a.go``.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        encoded = [os.fsencode(p.strip()) for p in patterns if p.strip()]
        self._empty = not encoded
        self._filter = IgnoreFilter(encoded)

    def matches(self, rel_path: str) -> bool:
        if self._empty:
            return False
        parts = rel_path.strip("/").split("/")
        for depth in range(1, len(parts)):
            parent = "/".join(parts[:depth]) + "/"
            if self._filter.is_ignored(os.fsencode(parent)):
                return True
        return bool(self._filter.is_ignored(os.fsencode("/".join(parts))))


def collect_candidates(git: Git, src_root: Path, options: CopyOptions) -> list[str]:
    """Union of the enabled file categories, de-duplicated in first-seen order."""
    candidates: list[str] = []
    ignored: list[str] | None = None

    if options.copy_ignored:
        ignored = git.list_ignored_files(src_root)
        candidates.extend(ignored)
    if options.copy_untracked:
        candidates.extend(git.list_untracked_files(src_root))
    if options.copy_modified:
        candidates.extend(git.list_modified_files(src_root))
    if options.copy:
        if ignored is None:
            ignored = git.list_ignored_files(src_root)
        include = PatternMatcher(options.copy)
        candidates.extend(f for f in ignored if include.matches(f))

    return list(dict.fromkeys(candidates))


def copy_files(git: Git, src_root: Path, dst_root: Path, options: CopyOptions) -> list[str]:
    """Copy candidate files from src_root into dst_root.

    Failures on individual files are logged and skipped.

    Returns:
        Relative paths of the files that were copied
    """
    exclude = PatternMatcher(options.no_copy)
    copied: list[str] = []

    for rel_path in collect_candidates(git, src_root, options):
        if rel_path.endswith("/"):
            continue
        src = src_root / rel_path
        if _is_inside_any(src, options.exclude_dirs):
            continue
        if exclude.matches(rel_path):
            logger.debug("not copying %s: matches wt.nocopy", rel_path)
            continue
        if src.is_dir():
            continue
        if not src.exists():
            logger.debug("not copying %s: missing from source", rel_path)
            continue

        try:
            copy_file(src, dst_root / rel_path)
        except OSError as e:
            logger.warning("failed to copy %s: %s", rel_path, e)
            continue
        copied.append(rel_path)

    return copied


def _is_inside_any(path: Path, dirs: tuple[Path, ...]) -> bool:
    return any(path.is_relative_to(d) for d in dirs)


def copy_file(src: Path, dst: Path) -> None:
    """Copy one file, creating parent directories with mode 0755.

    Tries a copy-on-write clone first where supported, otherwise copies bytes
    and preserves the mode bits (and the mtime on clone-capable platforms).
    """
    dst.parent.mkdir(mode=0o755, parents=True, exist_ok=True)

    if CLONE_SUPPORTED and _clone_file(src, dst):
        return

    shutil.copyfile(src, dst)
    if CLONE_SUPPORTED:
        shutil.copystat(src, dst)
    else:
        shutil.copymode(src, dst)


def _clone_file(src: Path, dst: Path) -> bool:
    if sys.platform == "darwin":
        return _clonefile_darwin(src, dst)
    return _ficlone_linux(src, dst)


def _ficlone_linux(src: Path, dst: Path) -> bool:
    import fcntl

    try:
        with open(src, "rb") as src_file, open(dst, "wb") as dst_file:
            fcntl.ioctl(dst_file.fileno(), FICLONE, src_file.fileno())
        shutil.copymode(src, dst)
    except OSError as e:
        logger.debug("FICLONE unavailable for %s: %s", src, e)
        return False
    return True


def _clonefile_darwin(src: Path, dst: Path) -> bool:
    libc_path = ctypes.util.find_library("c")
    if libc_path is None:
        return False
    libc = ctypes.CDLL(libc_path, use_errno=True)
    if dst.exists() or dst.is_symlink():
        dst.unlink()
    result = libc.clonefile(os.fsencode(src), os.fsencode(dst), ctypes.c_int(0))
    if result != 0:
        errno = ctypes.get_errno()
        logger.debug("clonefile failed for %s: %s", src, os.strerror(errno))
        return False
    return True
