# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/config/paths.py

from pathlib import Path
from typing import Final, Optional

from ghc.auth.environment import (
    CONFIG_DIR_ENV_VAR, STATE_DIR_ENV_VAR, Environment, OsEnvironment,
)

CONFIG_FILE: Final = "config.yml"
LOCK_SUFFIX: Final = ".lock"


def config_dir(environment: Optional[Environment] = None) -> Path:
    """Directory holding config.yml.

    Evaluated on every call so environment changes are picked up
    (important for test isolation).
    """
    environment = environment or OsEnvironment()
    explicit = environment.get(CONFIG_DIR_ENV_VAR)
    if explicit:
        return Path(explicit)
    xdg = environment.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "gh"
    return Path.home() / ".config" / "gh"


def state_dir(environment: Optional[Environment] = None) -> Path:
    """Directory for logs and other non-config state."""
    environment = environment or OsEnvironment()
    explicit = environment.get(STATE_DIR_ENV_VAR)
    if explicit:
        return Path(explicit)
    xdg = environment.get("XDG_STATE_HOME")
    if xdg:
        return Path(xdg) / "gh"
    return Path.home() / ".local" / "state" / "gh"


def config_file(environment: Optional[Environment] = None) -> Path:
    return config_dir(environment) / CONFIG_FILE


def lock_file_for(document_path: Path) -> Path:
    return document_path.with_name(document_path.name + LOCK_SUFFIX)
