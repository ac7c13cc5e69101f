# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/cli/commands/auth.py

"""
Auth command handlers.

Handles: token, status, login, logout, switch, git-credential, setup-git
"""

import subprocess
from typing import Any, Callable, Optional, TextIO

import typer
from loguru import logger
from rich.console import Console

from ghc.auth import hosts as host_resolver
from ghc.auth.credential_helper import CredentialHelper
from ghc.cli.utils import EXIT_ERROR, mask_token
from ghc.config.store import ConfigStore
from ghc.system.exceptions import GhcError, NoTokenFound

CREDENTIAL_HELPER_COMMAND = "!ghc auth git-credential"


def _resolve_host(store: ConfigStore, hostname: Optional[str]) -> str:
    if hostname:
        return host_resolver.normalize(hostname)
    return store.authentication().default_host()


def token(
    store: ConfigStore,
    hostname: Optional[str] = None,
    user: Optional[str] = None
) -> str:
    """Return the token ghc would use for hostname (and optionally a specific account).

    Raises:
        NoTokenFound: If there is no usable token
    """
    host = _resolve_host(store, hostname)
    auth = store.authentication()
    found = auth.token_for_user(host, user) if user else auth.active_token(host)
    if found is None or not found[0]:
        raise NoTokenFound(host, user)
    return found[0]


def status(
    console: Console,
    store: ConfigStore,
    hostname: Optional[str] = None,
    show_token: bool = False
) -> dict[str, Any]:
    """Show the credential state of every known host.

    Args:
        console: Rich console for output
        store: Loaded config store
        hostname: Limit output to this host
        show_token: Print tokens unmasked

    Returns:
        Per-host status for JSON output
    """
    auth = store.authentication()
    hostnames = auth.hosts()
    if auth.override.active() and auth.default_host() not in hostnames:
        hostnames.append(auth.default_host())
    if hostname:
        host = host_resolver.normalize(hostname)
        hostnames = [h for h in hostnames if h == host]

    if not hostnames:
        target = f"the host {hostname}" if hostname else "any hosts"
        console.print(f"You are not logged into {target}. To log in, run: ghc auth login")
        raise typer.Exit(EXIT_ERROR)

    result: dict[str, Any] = {}
    for host in hostnames:
        credential = auth.active_credential(host)
        if credential is None:
            continue
        shown = credential.token if show_token else mask_token(credential.token)
        protocol = store.get_or_default(host, "git_protocol")
        console.print(f"[bold]{host}[/bold]")
        console.print(f"  [green]✓[/green] Logged in to {host} account {credential.user} ({credential.source})")
        console.print("  - Active account: true")
        console.print(f"  - Git operations protocol: {protocol}")
        console.print(f"  - Token: {shown}")
        if not auth.writeable(credential.source):
            console.print(f"  - Stored credentials are ignored while {credential.source} is set")

        others = [u for u in auth.users_for_host(host) if u != credential.user]
        for other in others:
            console.print(f"  [green]✓[/green] Logged in to {host} account {other} (config file)")
            console.print("  - Active account: false")

        result[host] = {
            "user": credential.user,
            "source": str(credential.source),
            "git_protocol": protocol,
            "api_url": host_resolver.rest_url(host),
            "other_users": others,
        }
    return result


def login(
    console: Console,
    store: ConfigStore,
    hostname: Optional[str],
    user: str,
    token_value: str,
    git_protocol: Optional[str] = None
) -> dict[str, Any]:
    """Store a credential for user and make it active."""
    host = host_resolver.normalize(hostname) if hostname else host_resolver.DEFAULT_HOST
    token_value = token_value.strip()
    if not token_value:
        raise NoTokenFound(host, user)
    store.authentication().login(host, user, token_value, git_protocol=git_protocol)
    console.print(f"[green]✓[/green] Logged in as {user} on {host}")
    return {"hostname": host, "user": user}


def logout(
    console: Console,
    store: ConfigStore,
    hostname: Optional[str] = None,
    user: Optional[str] = None
) -> dict[str, Any]:
    """Remove a stored account."""
    host = _resolve_host(store, hostname)
    auth = store.authentication()
    removed = user or auth.stored_user(host)
    now_active = auth.logout(host, user)
    console.print(f"[green]✓[/green] Logged out of {host} account {removed}")
    if now_active:
        console.print(f"[green]✓[/green] Switched active account for {host} to {now_active}")
    return {"hostname": host, "user": removed, "active": now_active}


def switch(
    console: Console,
    store: ConfigStore,
    hostname: Optional[str] = None,
    user: Optional[str] = None
) -> dict[str, Any]:
    """Switch the active account; with two accounts the other one is picked."""
    host = _resolve_host(store, hostname)
    auth = store.authentication()
    if not user:
        current = auth.stored_user(host)
        others = [u for u in auth.users_for_host(host) if u != current]
        if len(others) != 1:
            raise GhcError(f"specify the account to switch to with --user (accounts: {', '.join(others) or 'none'})")
        user = others[0]
    auth.switch(host, user)
    console.print(f"[green]✓[/green] Switched active account for {host} to {user}")
    return {"hostname": host, "user": user}


def git_credential(
    store: ConfigStore,
    operation: str,
    stdin: TextIO,
    stdout: TextIO
) -> int:
    """Serve one git credential helper request; returns the exit status."""
    return CredentialHelper(store.authentication()).run(operation, stdin, stdout)


def setup_git(
    console: Console,
    store: ConfigStore,
    hostname: Optional[str] = None,
    force: bool = False,
    run: Optional[Callable[..., subprocess.CompletedProcess]] = None
) -> list[str]:
    """Configure git to use ghc as the credential helper for logged-in hosts.

    Returns:
        Hosts that were configured
    """
    if hostname is None and force:
        raise GhcError("`--force` must be used in conjunction with `--hostname`")

    known = store.hosts()
    if hostname:
        host = host_resolver.normalize(hostname)
        if not force and host not in known:
            raise GhcError(
                f'You are not logged into the host "{host}". '
                f"Run `ghc auth login -h {host}` to authenticate or provide `--force`"
            )
        targets = [host]
    else:
        if not known:
            raise GhcError("You are not logged into any hosts. Run `ghc auth login` to authenticate.")
        targets = known

    run = run or subprocess.run
    for host in targets:
        _configure_credential_helper(host, run)
        console.print(f"[green]✓[/green] Configured git credential helper for {host}")
    return targets


def _configure_credential_helper(hostname: str, run: Callable[..., subprocess.CompletedProcess]) -> None:
    key = f"credential.{host_resolver.host_prefix(hostname)}.helper"
    commands = (
        # an empty helper first resets helpers inherited from other config files
        ["git", "config", "--global", "--replace-all", key, ""],
        ["git", "config", "--global", "--add", key, CREDENTIAL_HELPER_COMMAND],
    )
    for command in commands:
        logger.debug(f"Running: {' '.join(command)}")
        try:
            run(command, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise GhcError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise GhcError(f"failed to configure git credential helper for {hostname}: {stderr or e}") from e
