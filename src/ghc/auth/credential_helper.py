# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/auth/credential_helper.py

"""
git credential helper protocol.

git runs `ghc auth git-credential <operation>` and writes key=value lines
to stdin, terminated by a blank line or EOF. For `get` we answer with
exactly four lines:

    protocol=https
    host=<host>
    username=<login>
    password=<token>

When we cannot answer, git expects zero bytes on stdout and a non-zero
exit status so it can try the next helper. `store` and `erase` succeed
without output: credentials only ever live in config.yml.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, TextIO
from urllib.parse import urlsplit

from loguru import logger

from ghc.auth.store import TOKEN_USER, AuthStore
from ghc.system.exceptions import (
    CredentialProtocolMismatch, CredentialProtocolUnsupportedOperation,
)

OPERATIONS = ("get", "store", "erase")

EXIT_OK = 0
EXIT_SILENT_FAILURE = 1


class HelperState(Enum):
    READING_INPUT = "reading_input"
    DISPATCHED = "dispatched"
    RESPONDED = "responded"
    FAILED = "failed"


def parse_request(lines: Iterable[str]) -> dict[str, str]:
    """
    Parse key=value lines up to the first blank line.

    A url line is split into protocol, host, path, username and password,
    replacing any of those collected so far. Lines without '=' are skipped.

    Examples:
        >>> parse_request(["protocol=https", "host=github.com", ""])
        {'protocol': 'https', 'host': 'github.com'}
    """
    wants: dict[str, str] = {}
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            break
        key, sep, value = line.partition("=")
        if not sep:
            continue
        if key == "url":
            parts = _split_url(value)
            if parts is not None:
                wants.update(parts)
        else:
            wants[key] = value
    return wants


def _split_url(value: str) -> Optional[dict[str, str]]:
    try:
        parts = urlsplit(value)
        host = parts.hostname or ""
        username = parts.username or ""
        password = parts.password or ""
    except ValueError:
        logger.debug("Ignoring unparseable url in credential request")
        return None
    if not parts.scheme:
        return None
    return {
        "protocol": parts.scheme,
        "host": host,
        "path": parts.path,
        "username": username,
        "password": password,
    }


class CredentialHelper:
    """One run of the credential helper protocol."""

    def __init__(self, auth: AuthStore):
        self.auth = auth
        self.state = HelperState.READING_INPUT
        self.request: dict[str, str] = {}

    def run(self, operation: str, stdin: TextIO, stdout: TextIO) -> int:
        """
        Serve one git request.

        Returns:
            EXIT_OK, or EXIT_SILENT_FAILURE with nothing written to stdout

        Raises:
            CredentialProtocolUnsupportedOperation: For operations git never sends
        """
        if operation not in OPERATIONS:
            self.state = HelperState.FAILED
            raise CredentialProtocolUnsupportedOperation(operation)

        self.request = parse_request(stdin)
        self.state = HelperState.DISPATCHED

        if operation != "get":
            # nothing is cached outside config.yml, so there is nothing to store or erase
            self.state = HelperState.RESPONDED
            return EXIT_OK

        try:
            response = self.get(self.request)
        except CredentialProtocolMismatch as e:
            logger.debug(f"git-credential get: {e.reason}")
            self.state = HelperState.FAILED
            return EXIT_SILENT_FAILURE

        stdout.write("".join(f"{key}={value}\n" for key, value in response))
        stdout.flush()
        self.state = HelperState.RESPONDED
        return EXIT_OK

    def get(self, wants: dict[str, str]) -> list[tuple[str, str]]:
        """
        Resolve the credential for a parsed request.

        Raises:
            CredentialProtocolMismatch: If this helper should not answer
        """
        protocol = wants.get("protocol", "")
        if protocol != "https":
            raise CredentialProtocolMismatch(f"unsupported protocol {protocol!r}")

        host = wants.get("host", "")
        found = self.auth.active_token(host)
        user = self.auth.active_user(host)
        if found is None or not found[0]:
            raise CredentialProtocolMismatch(f"no token for {host!r}")
        if not user:
            raise CredentialProtocolMismatch(f"no user for {host!r}")
        token = found[0]

        wants_username = wants.get("username", "")
        if wants_username and not _username_matches(wants_username, user):
            raise CredentialProtocolMismatch(
                f"requested user {wants_username!r} is not the active account"
            )

        return [
            ("protocol", "https"),
            ("host", host),
            ("username", user),
            ("password", token),
        ]


def _username_matches(requested: str, resolved: str) -> bool:
    if resolved == TOKEN_USER or requested == TOKEN_USER:
        return True
    return requested.lower() == resolved.lower()
