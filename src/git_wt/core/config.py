"""Configuration loaded from the wt.* namespace of git config.

Values are read fresh on every invocation, defaulted, then overlaid with the
flags the user passed explicitly.
"""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from git_wt.core.git.abc import Git

DEFAULT_BASE_DIR = ".wt"

KEY_BASE_DIR = "wt.basedir"
KEY_COPY_IGNORED = "wt.copyignored"
KEY_COPY_UNTRACKED = "wt.copyuntracked"
KEY_COPY_MODIFIED = "wt.copymodified"
KEY_NO_COPY = "wt.nocopy"
KEY_COPY = "wt.copy"
KEY_HOOK = "wt.hook"
KEY_DELETE_HOOK = "wt.deletehook"
KEY_REMOVER = "wt.remover"
KEY_NOCD = "wt.nocd"
KEY_RELATIVE = "wt.relative"


class NoCdMode(Enum):
    """When the shell wrapper should stay in the current directory."""

    NEVER = "never"
    CREATE = "create"
    ALWAYS = "always"


@dataclass(frozen=True)
class WtConfig:
    """Effective configuration for one invocation."""

    base_dir: str = DEFAULT_BASE_DIR
    base_dir_configured: bool = False
    copy_ignored: bool = False
    copy_untracked: bool = False
    copy_modified: bool = False
    no_copy: tuple[str, ...] = ()
    copy: tuple[str, ...] = ()
    hooks: tuple[str, ...] = ()
    delete_hooks: tuple[str, ...] = ()
    remover: str | None = None
    nocd: NoCdMode = NoCdMode.NEVER
    relative: bool = False
    allow_delete_default: bool = False


@dataclass(frozen=True)
class ConfigOverrides:
    """Flags supplied on the command line. None means "not given"."""

    base_dir: str | None = None
    copy_ignored: bool | None = None
    copy_untracked: bool | None = None
    copy_modified: bool | None = None
    no_copy: tuple[str, ...] | None = None
    copy: tuple[str, ...] | None = None
    hooks: tuple[str, ...] | None = None
    delete_hooks: tuple[str, ...] | None = None
    remover: str | None = None
    relative: bool | None = None
    allow_delete_default: bool | None = None


def parse_bool(value: str | None) -> bool:
    """Interpret a git config boolean. Anything unrecognised is false."""
    if value is None:
        return False
    return value.strip().lower() in ("true", "yes", "on", "1")


def parse_nocd(value: str | None) -> NoCdMode:
    if value is None:
        return NoCdMode.NEVER
    normalized = value.strip().lower()
    if normalized in ("true", "all"):
        return NoCdMode.ALWAYS
    if normalized == "create":
        return NoCdMode.CREATE
    return NoCdMode.NEVER


def load_config(git: Git, cwd: Path) -> WtConfig:
    """Read every wt.* key and apply defaults."""
    base_dir = git.get_config(cwd, KEY_BASE_DIR)
    remover = git.get_config(cwd, KEY_REMOVER)
    return WtConfig(
        base_dir=base_dir if base_dir else DEFAULT_BASE_DIR,
        base_dir_configured=bool(base_dir),
        copy_ignored=parse_bool(git.get_config(cwd, KEY_COPY_IGNORED)),
        copy_untracked=parse_bool(git.get_config(cwd, KEY_COPY_UNTRACKED)),
        copy_modified=parse_bool(git.get_config(cwd, KEY_COPY_MODIFIED)),
        no_copy=tuple(git.get_config_all(cwd, KEY_NO_COPY)),
        copy=tuple(git.get_config_all(cwd, KEY_COPY)),
        hooks=tuple(git.get_config_all(cwd, KEY_HOOK)),
        delete_hooks=tuple(git.get_config_all(cwd, KEY_DELETE_HOOK)),
        remover=remover if remover else None,
        nocd=parse_nocd(git.get_config(cwd, KEY_NOCD)),
        relative=parse_bool(git.get_config(cwd, KEY_RELATIVE)),
    )


def apply_overrides(config: WtConfig, overrides: ConfigOverrides) -> WtConfig:
    """Overlay explicitly supplied flags onto the loaded configuration."""
    changes: dict[str, object] = {}
    if overrides.base_dir is not None:
        changes["base_dir"] = overrides.base_dir
        changes["base_dir_configured"] = True
    for field_name in (
        "copy_ignored",
        "copy_untracked",
        "copy_modified",
        "no_copy",
        "copy",
        "hooks",
        "delete_hooks",
        "remover",
        "relative",
        "allow_delete_default",
    ):
        value = getattr(overrides, field_name)
        if value is not None:
            changes[field_name] = value
    if not changes:
        return config
    return replace(config, **changes)
