# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/auth/environment.py

"""
Environment access and token override detection.

All environment lookups go through an Environment accessor so tests can
hand in a plain mapping instead of mutating os.environ. The override rule
itself is pure logic over that accessor.
"""

import os
from typing import Mapping, Optional, Protocol

from loguru import logger

# Checked in this order; the first one present wins
TOKEN_ENV_VARS: tuple[str, ...] = ("GH_TOKEN", "GITHUB_TOKEN")

HOST_ENV_VAR = "GH_HOST"
CONFIG_DIR_ENV_VAR = "GH_CONFIG_DIR"
STATE_DIR_ENV_VAR = "GH_STATE_DIR"
DEBUG_ENV_VAR = "GH_DEBUG"


class Environment(Protocol):
    """Read-only access to environment variables."""

    def get(self, name: str) -> Optional[str]:
        """Return the value of a variable, or None if it is not set."""
        ...


class OsEnvironment:
    """Environment backed by the real process environment."""

    def get(self, name: str) -> Optional[str]:
        return os.environ.get(name)


class MappingEnvironment:
    """Environment backed by a fixed mapping (tests, subprocess simulation)."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = dict(values or {})

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)


class EnvironmentOverride:
    """Detects externally injected tokens that take precedence over stored ones."""

    def __init__(self, environment: Optional[Environment] = None,
                 names: tuple[str, ...] = TOKEN_ENV_VARS):
        self.environment = environment or OsEnvironment()
        self.names = names

    def token(self) -> Optional[tuple[str, str]]:
        """Return (token, variable name) for the highest-priority override.

        A variable that is present wins, even when its value is empty.
        """
        for name in self.names:
            value = self.environment.get(name)
            if value is not None:
                logger.debug(f"Token override from {name}")
                return value, name
        return None

    def active(self) -> bool:
        return self.token() is not None
