"""Global configuration, loaded once at the CLI entry point.

Example ~/.treeswitch/config.toml:

    # Initialize and update submodules after every branch checkout
    recurse_submodules = true

    [git]
    executable = "/usr/local/bin/git"
    timeout_seconds = 300
    lfs_progress = true
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "config.toml"
HOME_ENV_VAR = "TREESWITCH_HOME"
RECURSE_SUBMODULES_ENV_VAR = "TREESWITCH_RECURSE_SUBMODULES"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    All fields are read-only after construction.
    """

    recurse_submodules: bool = False
    git_executable: str = "git"
    git_timeout_seconds: int = 600
    lfs_progress: bool = True

    @staticmethod
    def test(
        *,
        recurse_submodules: bool = False,
        git_executable: str = "git",
        git_timeout_seconds: int = 600,
        lfs_progress: bool = True,
    ) -> GlobalConfig:
        """Create a GlobalConfig with sensible test defaults."""
        return GlobalConfig(
            recurse_submodules=recurse_submodules,
            git_executable=git_executable,
            git_timeout_seconds=git_timeout_seconds,
            lfs_progress=lfs_progress,
        )


def default_config_dir() -> Path:
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / ".treeswitch"


def load_global_config(config_dir: Path) -> GlobalConfig:
    """Load config.toml from the given directory if present; otherwise return defaults.

    TREESWITCH_RECURSE_SUBMODULES, when set, overrides `recurse_submodules`
    from the file.
    """
    cfg_path = config_dir / CONFIG_FILENAME
    data: dict = {}
    if cfg_path.exists():
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))

    git_section = data.get("git", {})
    recurse_submodules = bool(data.get("recurse_submodules", False))

    env_override = os.environ.get(RECURSE_SUBMODULES_ENV_VAR)
    if env_override is not None:
        recurse_submodules = env_override.strip().lower() in _TRUTHY

    return GlobalConfig(
        recurse_submodules=recurse_submodules,
        git_executable=str(git_section.get("executable", "git")),
        git_timeout_seconds=int(git_section.get("timeout_seconds", 600)),
        lfs_progress=bool(git_section.get("lfs_progress", True)),
    )
