# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/config/document.py

"""
The persisted config document.

config.yml layout:

    git_protocol: ssh          # global entries
    aliases:
      co: pr checkout
    hosts:
      github.com:
        user: monalisa         # active account
        oauth_token: gho_...   # active account's token
        git_protocol: https    # host-scoped entries
        users:
          monalisa:
            oauth_token: gho_...
          hubot:
            oauth_token: gho_...

The document is always rewritten as a whole: a temp file in the same
directory, fsync, then an atomic rename over the old file.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Any, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from ghc.system.exceptions import ConfigError


class UserEntry(BaseModel):
    """Stored credential of one account on a host."""
    oauth_token: Optional[str] = None


class HostEntry(BaseModel):
    """Everything stored for one host: credentials plus host-scoped settings."""
    user: Optional[str] = None
    oauth_token: Optional[str] = None
    users: dict[str, UserEntry] = Field(default_factory=dict)
    settings: dict[str, str] = Field(default_factory=dict)

    def has_credential(self) -> bool:
        return bool(self.oauth_token) or any(u.oauth_token for u in self.users.values())

    def is_empty(self) -> bool:
        return not (self.user or self.oauth_token or self.users or self.settings)


class ConfigDocument(BaseModel):
    """In-memory form of config.yml."""
    settings: dict[str, str] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)
    hosts: dict[str, HostEntry] = Field(default_factory=dict)

    @classmethod
    def from_data(cls, data: Any) -> ConfigDocument:
        """Build a document from parsed YAML.

        Raises:
            ConfigError: If the structure is not a valid config document
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("config document must be a mapping")

        settings: dict[str, str] = {}
        aliases: dict[str, str] = {}
        hosts: dict[str, HostEntry] = {}

        for key, value in data.items():
            key = str(key)
            if key == "aliases":
                for name, expansion in _mapping(value, "aliases").items():
                    aliases[str(name)] = _scalar(expansion) or ""
            elif key == "hosts":
                for hostname, host_data in _mapping(value, "hosts").items():
                    hosts[str(hostname)] = _host_entry(str(hostname), host_data)
            else:
                scalar = _scalar(value)
                if scalar is not None:
                    settings[key] = scalar

        try:
            return cls(settings=settings, aliases=aliases, hosts=hosts)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    def to_data(self) -> dict[str, Any]:
        """Plain-data form for YAML output, without empty sections."""
        data: dict[str, Any] = dict(self.settings)
        if self.aliases:
            data["aliases"] = dict(self.aliases)
        if self.hosts:
            data["hosts"] = {
                hostname: _host_data(entry) for hostname, entry in self.hosts.items()
            }
        return data

    @classmethod
    def load(cls, path: Path) -> ConfigDocument:
        """Load the document; a missing or blank file is an empty document."""
        if not path.exists():
            logger.debug(f"No config at {path}, starting empty")
            return cls()
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"failed to parse {path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"failed to read {path}: {e}") from e
        logger.debug(f"Loaded config from {path}")
        return cls.from_data(data)

    def save(self, path: Path) -> None:
        """Atomically replace path with this document.

        Either the new document is fully in place afterwards, or the old one
        is untouched.

        Raises:
            ConfigError: If the document cannot be written
        """
        content = yaml.safe_dump(self.to_data(), default_flow_style=False, sort_keys=False)
        temp_path = path.with_name(f"{path.name}.pending-{uuid.uuid4().hex}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise ConfigError(f"failed to write {path}: {e}") from e
        logger.debug(f"Wrote config to {path}")


def _mapping(value: Any, section: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{section}' must be a mapping")
    return value


def _scalar(value: Any) -> Optional[str]:
    """Coerce a YAML scalar to the string form used in memory."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise ConfigError(f"expected a plain value, got {type(value).__name__}")
    return str(value)


def _host_entry(hostname: str, data: Any) -> HostEntry:
    entry = HostEntry()
    for key, value in _mapping(data, f"hosts.{hostname}").items():
        key = str(key)
        if key == "users":
            for login, user_data in _mapping(value, f"hosts.{hostname}.users").items():
                user_data = _mapping(user_data, f"hosts.{hostname}.users.{login}")
                entry.users[str(login)] = UserEntry(oauth_token=_scalar(user_data.get("oauth_token")))
        elif key == "user":
            entry.user = _scalar(value)
        elif key == "oauth_token":
            entry.oauth_token = _scalar(value)
        else:
            scalar = _scalar(value)
            if scalar is not None:
                entry.settings[key] = scalar
    return entry


def _host_data(entry: HostEntry) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if entry.user is not None:
        data["user"] = entry.user
    if entry.oauth_token is not None:
        data["oauth_token"] = entry.oauth_token
    data.update(entry.settings)
    if entry.users:
        data["users"] = {
            login: ({"oauth_token": user.oauth_token} if user.oauth_token is not None else {})
            for login, user in entry.users.items()
        }
    return data
