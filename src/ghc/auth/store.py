# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/auth/store.py

"""
Per-host credential resolution.

Precedence for the active token of a host, first match wins:
1. GH_TOKEN, then GITHUB_TOKEN (environment overrides, never persisted)
2. the token stored in config.yml for the canonical hostname
3. for gist.<host>, the token stored for <host>

A token from the environment has no login attached; its user is the
generic TOKEN_USER identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from loguru import logger

from ghc.auth import hosts as host_resolver
from ghc.auth.environment import EnvironmentOverride
from ghc.config.document import HostEntry, UserEntry
from ghc.config.options import find_option
from ghc.system.exceptions import ConfigValueInvalid, NoTokenFound, TokenNotWriteable

if TYPE_CHECKING:
    from ghc.config.store import ConfigStore

# Login reported for tokens that carry no account, e.g. GH_TOKEN
TOKEN_USER = "x-access-token"


class SourceKind(Enum):
    CONFIG_FILE = "config_file"
    ENV_VAR = "env_var"


@dataclass(frozen=True)
class TokenSource:
    """Where a resolved token came from."""
    kind: SourceKind
    name: Optional[str] = None

    @classmethod
    def config_file(cls) -> TokenSource:
        return cls(SourceKind.CONFIG_FILE)

    @classmethod
    def env_var(cls, name: str) -> TokenSource:
        return cls(SourceKind.ENV_VAR, name)

    @property
    def writeable(self) -> bool:
        """Only tokens from the config file may be overwritten by ghc."""
        return self.kind is SourceKind.CONFIG_FILE

    def __str__(self) -> str:
        return self.name if self.kind is SourceKind.ENV_VAR and self.name else "config file"


@dataclass(frozen=True)
class HostCredential:
    """The credential selected for a host at resolution time."""
    hostname: str
    user: str
    token: str
    source: TokenSource


class AuthStore:
    """Resolves and changes credentials on top of a ConfigStore."""

    def __init__(self, config: ConfigStore, override: Optional[EnvironmentOverride] = None):
        self.config = config
        self.override = override or EnvironmentOverride(config.environment)

    # ---- Resolution ----

    def _stored(self, hostname: str) -> Optional[tuple[str, HostEntry]]:
        """First host entry holding a token, trying the gist fallback."""
        with self.config.guard.shared():
            for candidate in host_resolver.candidates(hostname):
                entry = self.config.document.hosts.get(candidate)
                if entry is not None and entry.oauth_token:
                    return candidate, entry
        return None

    def active_token(self, hostname: str) -> Optional[tuple[str, TokenSource]]:
        """Return (token, source) for hostname, or None."""
        env = self.override.token()
        if env is not None:
            token, name = env
            return token, TokenSource.env_var(name)

        stored = self._stored(hostname)
        if stored is None:
            return None
        found_host, entry = stored
        if found_host != host_resolver.normalize(hostname):
            logger.debug(f"Using credential of {found_host} for {hostname}")
        return entry.oauth_token, TokenSource.config_file()

    def active_user(self, hostname: str) -> Optional[str]:
        """Return the login of the active account, TOKEN_USER for overrides."""
        if self.override.active():
            return TOKEN_USER
        stored = self._stored(hostname)
        if stored is None:
            return None
        return stored[1].user or None

    def active_credential(self, hostname: str) -> Optional[HostCredential]:
        found = self.active_token(hostname)
        user = self.active_user(hostname)
        if found is None or not user:
            return None
        token, source = found
        return HostCredential(host_resolver.normalize(hostname), user, token, source)

    def writeable(self, source: TokenSource) -> bool:
        return source.writeable

    def hosts(self) -> list[str]:
        return self.config.hosts()

    def default_host(self) -> str:
        return host_resolver.default_host(self.hosts(), self.config.environment)

    def stored_user(self, hostname: str) -> Optional[str]:
        """Active login recorded in config.yml, ignoring environment overrides."""
        with self.config.guard.shared():
            entry = self.config.document.hosts.get(host_resolver.normalize(hostname))
            return entry.user if entry else None

    def users_for_host(self, hostname: str) -> list[str]:
        """Logins with a stored credential on hostname, active account last if unlisted."""
        host = host_resolver.normalize(hostname)
        with self.config.guard.shared():
            entry = self.config.document.hosts.get(host)
            if entry is None:
                return []
            users = list(entry.users)
            if entry.user and entry.user not in users:
                users.append(entry.user)
            return users

    def token_for_user(self, hostname: str, user: str) -> Optional[tuple[str, TokenSource]]:
        """Stored token of a specific account; environment overrides do not apply."""
        host = host_resolver.normalize(hostname)
        with self.config.guard.shared():
            entry = self.config.document.hosts.get(host)
            if entry is None:
                return None
            if entry.user == user and entry.oauth_token:
                return entry.oauth_token, TokenSource.config_file()
            account = entry.users.get(user)
            if account is None or not account.oauth_token:
                return None
            return account.oauth_token, TokenSource.config_file()

    # ---- Changes ----

    def _ensure_writeable(self, hostname: str) -> None:
        env = self.override.token()
        if env is not None:
            raise TokenNotWriteable(hostname, env[1])

    def login(self, hostname: str, user: str, token: str,
              git_protocol: Optional[str] = None) -> None:
        """Store a credential for user on hostname and make it the active account.

        Raises:
            TokenNotWriteable: If an environment override would shadow it
            ConfigValueInvalid: If git_protocol is not an allowed value
        """
        host = host_resolver.normalize(hostname)
        self._ensure_writeable(host)
        if git_protocol:
            option = find_option("git_protocol")
            if not option.allows(git_protocol):
                raise ConfigValueInvalid("git_protocol", git_protocol, option.allowed_values)

        with self.config.guard.exclusive("login"):
            entry = self.config.document.hosts.setdefault(host, HostEntry())
            if entry.user and entry.oauth_token and entry.user != user:
                entry.users[entry.user] = UserEntry(oauth_token=entry.oauth_token)
            entry.user = user
            entry.oauth_token = token
            entry.users[user] = UserEntry(oauth_token=token)
            if git_protocol:
                entry.settings["git_protocol"] = git_protocol
        logger.info(f"Logged in to {host} account {user}")

    def set_token(self, hostname: str, token: str) -> None:
        """Replace the active account's stored token.

        Raises:
            TokenNotWriteable: If an environment override would shadow it
        """
        host = host_resolver.normalize(hostname)
        self._ensure_writeable(host)
        with self.config.guard.exclusive("set_token"):
            entry = self.config.document.hosts.setdefault(host, HostEntry())
            entry.oauth_token = token
            if entry.user:
                entry.users[entry.user] = UserEntry(oauth_token=token)

    def logout(self, hostname: str, user: Optional[str] = None) -> Optional[str]:
        """Remove a stored account (the active one by default).

        If the active account is removed, another stored account on the host
        becomes active.

        Returns:
            The login now active on hostname, or None

        Raises:
            NoTokenFound: If the account has no stored credential
        """
        host = host_resolver.normalize(hostname)
        users = self.users_for_host(host)
        if not users:
            raise NoTokenFound(host, user)
        user = user or self.stored_user(host)
        if user not in users:
            raise NoTokenFound(host, user)

        with self.config.guard.exclusive("logout"):
            entry = self.config.document.hosts[host]
            entry.users.pop(user, None)
            if entry.user == user:
                entry.user = None
                entry.oauth_token = None
                for login, account in entry.users.items():
                    if account.oauth_token:
                        entry.user = login
                        entry.oauth_token = account.oauth_token
                        break
            if entry.is_empty():
                del self.config.document.hosts[host]
            active = entry.user
        logger.info(f"Logged out of {host} account {user}")
        return active

    def switch(self, hostname: str, user: str) -> None:
        """Make another stored account active on hostname.

        Raises:
            NoTokenFound: If user has no stored credential for hostname
        """
        host = host_resolver.normalize(hostname)
        found = self.token_for_user(host, user)
        if found is None:
            raise NoTokenFound(host, user)
        new_token = found[0]

        env = self.override.token()
        if env is not None:
            logger.warning(f"{env[1]} is set; it stays in effect for {host} after switching")

        with self.config.guard.exclusive("switch"):
            entry = self.config.document.hosts[host]
            if entry.user and entry.oauth_token:
                entry.users[entry.user] = UserEntry(oauth_token=entry.oauth_token)
            entry.user = user
            entry.oauth_token = new_token
        logger.info(f"Switched active account for {host} to {user}")
