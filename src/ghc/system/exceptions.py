# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/system/exceptions.py

"""
ghc-specific exception classes.

Recoverable conditions (unknown key, missing token) are turned into
actionable messages by the CLI. Lock poisoning and credential protocol
misuse propagate immediately without any attempt at recovery.
"""

from typing import Optional, Sequence


class GhcError(Exception):
    """Base exception for all ghc-specific errors."""
    pass


# === CONFIGURATION ERRORS ===

class ConfigError(GhcError):
    """Raised when the config document cannot be loaded, validated or written."""
    pass


class ConfigKeyUnknown(ConfigError):
    """Raised when a key is neither set nor known to the option registry."""

    def __init__(self, key: str, hostname: str = ""):
        self.key = key
        self.hostname = hostname
        super().__init__(f'could not find key "{key}"')


class ConfigValueInvalid(ConfigError):
    """Raised when a value is outside the allowed set of a registry option."""

    def __init__(self, key: str, value: str, allowed_values: Sequence[str]):
        self.key = key
        self.value = value
        self.allowed_values = tuple(allowed_values)
        valid = ", ".join(f"'{v}'" for v in self.allowed_values)
        super().__init__(f'failed to set "{key}" to "{value}": valid values are {valid}')


class ConfigLockPoisoned(ConfigError):
    """Raised when the previous holder of the config guard terminated abnormally.

    This is fatal: the in-memory or on-disk state may be inconsistent, so
    the operation is aborted instead of retried.
    """

    def __init__(self, message: str, lock_path: Optional[str] = None):
        self.lock_path = lock_path
        super().__init__(message)


# === AUTHENTICATION ERRORS ===

class AuthError(GhcError):
    """Base class for credential resolution errors."""
    pass


class NoTokenFound(AuthError):
    """Raised when no credential is available for a host (and optional account)."""

    def __init__(self, hostname: str, user: Optional[str] = None):
        self.hostname = hostname
        self.user = user
        message = f"no oauth token found for {hostname}"
        if user:
            message += f" account {user}"
        super().__init__(message)


class TokenNotWriteable(AuthError):
    """Raised when a stored credential would be shadowed by an environment override."""

    def __init__(self, hostname: str, source_name: str):
        self.hostname = hostname
        self.source_name = source_name
        super().__init__(
            f"The value of the {source_name} environment variable is being used for "
            f"authentication to {hostname}. To store credentials instead, first clear "
            f"the value from the environment."
        )


# === CREDENTIAL HELPER PROTOCOL ERRORS ===

class CredentialProtocolError(GhcError):
    """Base class for git credential helper protocol errors."""
    pass


class CredentialProtocolUnsupportedOperation(CredentialProtocolError):
    """Raised for an operation other than get, store or erase (protocol misuse)."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f'ghc auth git-credential: "{operation}" operation not supported')


class CredentialProtocolMismatch(CredentialProtocolError):
    """Signals a request this helper cannot answer.

    Never printed: git expects zero bytes of output and a non-zero status so
    it can fall through to the next credential helper.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
