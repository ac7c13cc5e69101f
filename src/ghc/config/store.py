# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/config/store.py

"""
Layered key/value configuration.

Lookup order for get(hostname, key):
    host-scoped value -> global value -> registry default

Credential-shaped keys (oauth_token, user) asked for a specific host are
answered by AuthStore, so environment overrides apply to them too.

Every mutation runs under the document's exclusive guard, every read under
its shared guard. Nothing reaches disk until write().
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from loguru import logger

from ghc.auth.environment import Environment, OsEnvironment
from ghc.auth.hosts import normalize
from ghc.config.document import ConfigDocument, HostEntry
from ghc.config.options import (
    CONFIG_OPTIONS, CREDENTIAL_KEYS, RESERVED_KEYS, Scope, default_for_key, find_option,
)
from ghc.config.paths import config_file, lock_file_for
from ghc.system.exceptions import ConfigError, ConfigKeyUnknown, ConfigValueInvalid
from ghc.system.locking import ConfigGuard, guard_for

if TYPE_CHECKING:
    from ghc.auth.store import AuthStore


class ConfigStore:
    """The config document plus the rules for reading and changing it."""

    def __init__(self, document: Optional[ConfigDocument] = None, path: Optional[Path] = None,
                 environment: Optional[Environment] = None, guard: Optional[ConfigGuard] = None):
        self.document = document or ConfigDocument()
        self.path = path
        self.environment = environment or OsEnvironment()
        self.guard = guard or guard_for(lock_file_for(path) if path else None)
        self._auth: Optional[AuthStore] = None

    @classmethod
    def load(cls, path: Optional[Path] = None,
             environment: Optional[Environment] = None) -> ConfigStore:
        """Load config.yml from path, or from the config directory.

        Raises:
            ConfigError: If the document exists but cannot be parsed
            ConfigLockPoisoned: If the guard for this document is poisoned
        """
        environment = environment or OsEnvironment()
        path = Path(path) if path else config_file(environment)
        guard = guard_for(lock_file_for(path))
        with guard.shared():
            document = ConfigDocument.load(path)
        return cls(document, path, environment, guard)

    @classmethod
    def empty(cls, environment: Optional[Environment] = None) -> ConfigStore:
        """In-memory store with nothing set; write() is a no-op."""
        return cls(environment=environment)

    def authentication(self) -> AuthStore:
        if self._auth is None:
            from ghc.auth.store import AuthStore
            self._auth = AuthStore(self)
        return self._auth

    # ---- Values ----

    def get(self, hostname: str, key: str) -> Optional[str]:
        """Resolve key for hostname ("" for global only); None if unset with no default."""
        host = normalize(hostname) if hostname else ""

        if host and key in CREDENTIAL_KEYS:
            auth = self.authentication()
            if key == "oauth_token":
                found = auth.active_token(host)
                return found[0] if found else None
            return auth.active_user(host)

        option = find_option(key)
        host_scoped = option is None or option.scope is Scope.HOST
        with self.guard.shared():
            if host and host_scoped:
                entry = self.document.hosts.get(host)
                if entry is not None and key in entry.settings:
                    return entry.settings[key]
            if key in self.document.settings:
                return self.document.settings[key]
        return default_for_key(key)

    def get_or_default(self, hostname: str, key: str) -> str:
        value = self.get(hostname, key)
        return value if value is not None else ""

    def require(self, hostname: str, key: str) -> str:
        """Like get(), but a missing value is an error.

        Raises:
            ConfigKeyUnknown: If key has no value and no default
        """
        value = self.get(hostname, key)
        if value is None:
            raise ConfigKeyUnknown(key, hostname)
        return value

    def set(self, hostname: str, key: str, value: str) -> list[str]:
        """Set key to value, globally ("" hostname) or for one host.

        Unknown keys are accepted; the returned list carries a warning for the
        caller to show.

        Raises:
            ConfigValueInvalid: If value is outside the option's allowed values
            ConfigError: If key cannot be set at the requested scope
            TokenNotWriteable: If setting oauth_token while an override is active
        """
        host = normalize(hostname) if hostname else ""

        if key in RESERVED_KEYS:
            raise ConfigError(f'"{key}" is a reserved section and cannot be set')
        if key in CREDENTIAL_KEYS:
            if not host:
                raise ConfigError(f'"{key}" can only be set for a specific host')
            if key == "user":
                raise ConfigError('use "ghc auth login" or "ghc auth switch" to change the active account')
            self.authentication().set_token(host, value)
            return []

        warnings: list[str] = []
        option = find_option(key)
        if option is None:
            message = f"'{key}' is not a known configuration key"
            logger.debug(message)
            warnings.append(message)
        else:
            if not option.allows(value):
                raise ConfigValueInvalid(key, value, option.allowed_values)
            if host and option.scope is Scope.GLOBAL:
                raise ConfigError(f'"{key}" is a global setting and cannot be set for a host')

        with self.guard.exclusive("set"):
            if host:
                self.document.hosts.setdefault(host, HostEntry()).settings[key] = value
            else:
                self.document.settings[key] = value
        logger.debug(f"Set {key} for {host or 'global'}")
        return warnings

    def unset(self, hostname: str, key: str) -> bool:
        """Remove an explicitly set value; returns False if nothing was set."""
        host = normalize(hostname) if hostname else ""
        if key in CREDENTIAL_KEYS or key in RESERVED_KEYS:
            raise ConfigError(f'"{key}" cannot be unset; use "ghc auth logout" for credentials')

        with self.guard.exclusive("unset"):
            if host:
                entry = self.document.hosts.get(host)
                if entry is None or key not in entry.settings:
                    return False
                del entry.settings[key]
                if entry.is_empty():
                    del self.document.hosts[host]
                return True
            return self.document.settings.pop(key, None) is not None

    def list_options(self, hostname: str = "") -> list[tuple[str, str]]:
        """Current value of every registry option for hostname."""
        return [(option.key, self.get_or_default(hostname, option.key)) for option in CONFIG_OPTIONS]

    # ---- Aliases ----

    def aliases(self) -> dict[str, str]:
        with self.guard.shared():
            return dict(self.document.aliases)

    def contains(self, name: str) -> bool:
        with self.guard.shared():
            return name in self.document.aliases

    def set_alias(self, name: str, expansion: str) -> None:
        with self.guard.exclusive("set_alias"):
            self.document.aliases[name] = expansion

    def delete_alias(self, name: str) -> Optional[str]:
        """Remove an alias; returns its old expansion, or None if it did not exist."""
        with self.guard.exclusive("delete_alias"):
            return self.document.aliases.pop(name, None)

    # ---- Hosts ----

    def hosts(self) -> list[str]:
        """Hostnames with at least one persisted credential."""
        with self.guard.shared():
            return [
                hostname for hostname, entry in self.document.hosts.items()
                if entry.has_credential()
            ]

    # ---- Persistence ----

    def write(self) -> None:
        """Persist the whole document atomically.

        Raises:
            ConfigError: If the document cannot be written (old file is kept)
            ConfigLockPoisoned: If the guard is poisoned
        """
        if self.path is None:
            logger.debug("In-memory config, nothing to write")
            return
        with self.guard.exclusive("write"):
            self.document.save(self.path)
