# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/cli/utils.py

"""
CLI utility functions shared by the ghc commands.

This module provides standardized functions for:
- Loading the config store with console error reporting
- Persisting changes
- Turning ghc errors into messages and typer exits

Exit codes: 1 for recoverable errors (missing token, invalid value),
2 for a poisoned config lock, which needs manual attention.
"""

from contextlib import contextmanager
from typing import Iterator

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from ghc.config.store import ConfigStore
from ghc.system.exceptions import ConfigLockPoisoned, GhcError, NoTokenFound
from ghc.system.locking import LockError

EXIT_ERROR = 1
EXIT_LOCK_POISONED = 2


def load_config_with_console(console: Console) -> ConfigStore:
    """
    Load the config store with proper error handling and console output.

    Args:
        console: Rich console for error output

    Returns:
        Loaded config store

    Raises:
        typer.Exit: If the config cannot be loaded
    """
    with handle_errors(console, "loading configuration"):
        return ConfigStore.load()


def write_config_with_console(console: Console, store: ConfigStore) -> None:
    """Persist the store, exiting with an error message on failure."""
    with handle_errors(console, "writing configuration"):
        store.write()


@contextmanager
def handle_errors(console: Console, operation: str) -> Iterator[None]:
    """Convert ghc errors raised inside the block into messages and exits."""
    try:
        yield
    except ConfigLockPoisoned as e:
        logger.debug(f"Config lock poisoned while {operation}")
        console.print(f"[red]✗[/red] Config lock poisoned: {escape(str(e))}")
        raise typer.Exit(EXIT_LOCK_POISONED)
    except NoTokenFound as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        console.print("To get started with ghc, please run: ghc auth login")
        raise typer.Exit(EXIT_ERROR)
    except LockError as e:
        handle_operation_error(console, operation, e)
    except GhcError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_ERROR)


def handle_operation_error(console: Console, operation: str, error: Exception) -> None:
    """Handle operation errors with consistent formatting."""
    console.print(f"[red]✗[/red] Error {operation}: {escape(str(error))}")
    raise typer.Exit(EXIT_ERROR)


def mask_token(token: str) -> str:
    """Show only the token prefix, e.g. 'gho_************************************'."""
    prefix, sep, rest = token.partition("_")
    if sep and len(prefix) <= 4:
        return f"{prefix}_{'*' * len(rest)}"
    return "*" * len(token)
