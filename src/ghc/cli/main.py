# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/cli/main.py

"""
CLI dispatcher routing commands to their handlers.

Each command loads the config store, calls a handler from
ghc.cli.commands, and persists the store when the handler changed it.
Errors from the handlers are turned into messages on stderr and exit
codes by ghc.cli.utils.handle_errors.
"""

# Standard library imports
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

# Third-party imports
import orjson
import typer
from rich.console import Console
from rich.markup import escape

# Local ghc imports
from ghc.auth.environment import DEBUG_ENV_VAR, OsEnvironment
from ghc.cli.commands import alias as alias_commands
from ghc.cli.commands import auth as auth_commands
from ghc.cli.commands import config as config_commands
from ghc.cli.utils import (
    EXIT_ERROR, handle_errors, load_config_with_console, write_config_with_console,
)
from ghc.config.paths import state_dir
from ghc.system.exceptions import CredentialProtocolUnsupportedOperation
from ghc.system.logging_setup import setup_logging

# Initialize Typer apps
app = typer.Typer(
    help="""ghc - credentials and configuration for GitHub hosts

[bold blue]Auth:[/bold blue] auth login, auth logout, auth status, auth switch, auth token
[bold green]Git:[/bold green] auth git-credential, auth setup-git
[bold magenta]Config:[/bold magenta] config get, config set, config unset, config list, alias
""",
    rich_markup_mode="rich",
    no_args_is_help=True
)
auth_app = typer.Typer(help="Authenticate ghc and git with GitHub", no_args_is_help=True)
config_app = typer.Typer(help="Manage configuration for ghc", no_args_is_help=True)
alias_app = typer.Typer(help="Create command shortcuts", no_args_is_help=True)
app.add_typer(auth_app, name="auth")
app.add_typer(config_app, name="config")
app.add_typer(alias_app, name="alias")

console = Console()
err_console = Console(stderr=True, soft_wrap=True)

TOP_LEVEL_COMMANDS = ("auth", "config", "alias", "help")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        try:
            pkg_version = version("ghc")
        except PackageNotFoundError:
            pkg_version = "unknown"
        console.print(f"ghc version {pkg_version}")
        raise typer.Exit()


def print_json(data: object) -> None:
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode())


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """ghc - credentials and configuration for GitHub hosts."""
    debug = debug or bool(OsEnvironment().get(DEBUG_ENV_VAR))
    setup_logging(debug=debug, log_dir=state_dir() if debug else None)


# =============================================================================
# AUTH COMMANDS
# =============================================================================

@auth_app.command("token")
def auth_token(
    hostname: Optional[str] = typer.Option(None, "--hostname", "-h", help="The hostname to read the token for"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="The account to read the token for"),
) -> None:
    """Print the authentication token ghc uses for a hostname and account."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "reading token"):
        value = auth_commands.token(store, hostname=hostname, user=user)
    typer.echo(value)


@auth_app.command("status")
def auth_status(
    hostname: Optional[str] = typer.Option(None, "--hostname", "-h", help="Check only a specific hostname"),
    show_token: bool = typer.Option(False, "--show-token", "-t", help="Display the auth token"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """Display active account and authentication state on each known host."""
    store = load_config_with_console(err_console)
    out = err_console if to_json else console
    with handle_errors(err_console, "reading status"):
        result = auth_commands.status(out, store, hostname=hostname, show_token=show_token)
    if to_json:
        print_json(result)


@auth_app.command("login")
def auth_login(
    hostname: Optional[str] = typer.Option(None, "--hostname", "-h", help="The hostname to authenticate with"),
    user: str = typer.Option(..., "--user", "-u", help="The account the token belongs to"),
    with_token: bool = typer.Option(False, "--with-token", help="Read token from standard input"),
    git_protocol: Optional[str] = typer.Option(None, "--git-protocol", "-p", help="Protocol for git operations: https or ssh"),
) -> None:
    """Store a token for a host and make its account active."""
    if with_token:
        token_value = sys.stdin.read()
    else:
        token_value = typer.prompt("Paste your authentication token", hide_input=True)
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "logging in"):
        auth_commands.login(console, store, hostname, user, token_value, git_protocol=git_protocol)
    write_config_with_console(err_console, store)


@auth_app.command("logout")
def auth_logout(
    hostname: Optional[str] = typer.Option(None, "--hostname", "-h", help="The hostname to log out of"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="The account to log out of"),
) -> None:
    """Remove a stored account for a host."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "logging out"):
        auth_commands.logout(console, store, hostname=hostname, user=user)
    write_config_with_console(err_console, store)


@auth_app.command("switch")
def auth_switch(
    hostname: Optional[str] = typer.Option(None, "--hostname", "-h", help="The hostname to switch account for"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="The account to switch to"),
) -> None:
    """Switch the active account for a host."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "switching account"):
        auth_commands.switch(console, store, hostname=hostname, user=user)
    write_config_with_console(err_console, store)


@auth_app.command("git-credential", hidden=True)
def auth_git_credential(
    operation: str = typer.Argument(..., help="get, store or erase"),
) -> None:
    """Implements the git credential helper protocol."""
    store = load_config_with_console(err_console)
    try:
        code = auth_commands.git_credential(store, operation, sys.stdin, sys.stdout)
    except CredentialProtocolUnsupportedOperation as e:
        err_console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_ERROR)
    raise typer.Exit(code)


@auth_app.command("setup-git")
def auth_setup_git(
    hostname: Optional[str] = typer.Option(None, "--hostname", "-h", help="The hostname to configure git for"),
    force: bool = typer.Option(False, "--force", "-f", help="Configure git even if not logged in to the host"),
) -> None:
    """Configure git to use ghc as a credential helper."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "configuring git"):
        auth_commands.setup_git(console, store, hostname=hostname, force=force)


# =============================================================================
# CONFIG COMMANDS
# =============================================================================

@config_app.command("get")
def config_get(
    key: str = typer.Argument(..., help="Configuration key"),
    hostname: Optional[str] = typer.Option(None, "--host", "-h", help="Get per-host setting"),
) -> None:
    """Print the value of a given configuration key."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "reading configuration"):
        value = config_commands.get(store, key, hostname=hostname)
    if value:
        typer.echo(value)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Configuration key"),
    value: str = typer.Argument(..., help="New value"),
    hostname: Optional[str] = typer.Option(None, "--host", "-h", help="Set per-host setting"),
) -> None:
    """Update configuration with a value for the given key."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "updating configuration"):
        config_commands.set_value(err_console, store, key, value, hostname=hostname)
    write_config_with_console(err_console, store)


@config_app.command("unset")
def config_unset(
    key: str = typer.Argument(..., help="Configuration key"),
    hostname: Optional[str] = typer.Option(None, "--host", "-h", help="Unset per-host setting"),
) -> None:
    """Remove an explicitly set configuration value."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "updating configuration"):
        removed = config_commands.unset(err_console, store, key, hostname=hostname)
    if removed:
        write_config_with_console(err_console, store)


@config_app.command("list")
def config_list(
    hostname: Optional[str] = typer.Option(None, "--host", "-h", help="Get per-host configuration"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """Print a list of configuration keys and values."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "reading configuration"):
        values = config_commands.list_values(store, hostname=hostname)
    if to_json:
        print_json(dict(values))
        return
    for key, value in values:
        typer.echo(f"{key}={value}")


# =============================================================================
# ALIAS COMMANDS
# =============================================================================

@alias_app.command("set")
def alias_set(
    name: str = typer.Argument(..., help="Alias name"),
    expansion: str = typer.Argument(..., help="Command the alias expands to"),
    clobber: bool = typer.Option(False, "--clobber", help="Overwrite an existing alias"),
) -> None:
    """Create a shortcut for a ghc command."""
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "setting alias"):
        alias_commands.set_alias(
            console, store, name, expansion, clobber=clobber, reserved=TOP_LEVEL_COMMANDS
        )
    write_config_with_console(err_console, store)


@alias_app.command("list")
def alias_list() -> None:
    """List configured aliases."""
    store = load_config_with_console(err_console)
    alias_commands.list_aliases(console, store)


@alias_app.command("delete")
def alias_delete(
    name: Optional[str] = typer.Argument(None, help="Alias to delete"),
    delete_all: bool = typer.Option(False, "--all", help="Delete all aliases"),
) -> None:
    """Delete an alias, or all of them with --all."""
    if bool(name) == delete_all:
        err_console.print("[red]✗[/red] specify an alias to delete or --all")
        raise typer.Exit(EXIT_ERROR)
    store = load_config_with_console(err_console)
    with handle_errors(err_console, "deleting alias"):
        if delete_all:
            alias_commands.delete_all_aliases(console, store)
        else:
            alias_commands.delete_alias(console, store, name)
    write_config_with_console(err_console, store)


# =============================================================================
# ENTRY POINT
# =============================================================================

def cli_main() -> None:  # pragma: no cover - entry point
    """Entry point for the ghc CLI application."""
    app()


if __name__ == "__main__":  # pragma: no cover
    cli_main()
