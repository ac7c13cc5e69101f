# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/config/options.py

"""
Registry of known configuration options.

get, set and list all consult this table, so defaults and allowed values
cannot drift between the read and write paths.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional


class Scope(Enum):
    """Where a value for an option may live."""
    GLOBAL = "global"  # top-level of the config document only
    HOST = "host"      # top-level, overridable per host


@dataclass(frozen=True)
class ConfigOption:
    """A known configuration option."""
    key: str
    description: str
    default_value: str = ""
    allowed_values: tuple[str, ...] = ()  # empty means any string
    scope: Scope = Scope.HOST

    def allows(self, value: str) -> bool:
        return not self.allowed_values or value in self.allowed_values

    @property
    def default(self) -> Optional[str]:
        """Default value, or None when the option has no meaningful default."""
        return self.default_value or None


CONFIG_OPTIONS: Final[tuple[ConfigOption, ...]] = (
    ConfigOption(
        key="git_protocol",
        description="the protocol to use for git clone and push operations",
        default_value="https",
        allowed_values=("https", "ssh"),
    ),
    ConfigOption(
        key="editor",
        description="the text editor program to use for authoring text",
        scope=Scope.GLOBAL,
    ),
    ConfigOption(
        key="prompt",
        description="toggle interactive prompting in the terminal",
        default_value="enabled",
        allowed_values=("enabled", "disabled"),
        scope=Scope.GLOBAL,
    ),
    ConfigOption(
        key="pager",
        description="the terminal pager program to send standard output to",
        scope=Scope.GLOBAL,
    ),
    ConfigOption(
        key="http_unix_socket",
        description="the path to a Unix domain socket through which to make an HTTP connection",
    ),
    ConfigOption(
        key="browser",
        description="the web browser to use for opening URLs",
        scope=Scope.GLOBAL,
    ),
)

_BY_KEY: Final[dict[str, ConfigOption]] = {option.key: option for option in CONFIG_OPTIONS}

# Host entry keys that hold credentials; these are resolved by AuthStore
CREDENTIAL_KEYS: Final[frozenset[str]] = frozenset({"oauth_token", "user"})

# Keys the config document uses for its own structure
RESERVED_KEYS: Final[frozenset[str]] = frozenset({"aliases", "hosts", "users"})


def find_option(key: str) -> Optional[ConfigOption]:
    return _BY_KEY.get(key)


def default_for_key(key: str) -> Optional[str]:
    """Return the registry default for key, or None for unknown keys and empty defaults."""
    option = _BY_KEY.get(key)
    return option.default if option else None
