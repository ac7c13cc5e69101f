# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/cli/commands/alias.py

"""
Alias command handlers.

Handles: set, list, delete
"""

from typing import Iterable

from rich.console import Console
from rich.table import Table

from ghc.config.store import ConfigStore
from ghc.system.exceptions import GhcError


def set_alias(
    console: Console,
    store: ConfigStore,
    name: str,
    expansion: str,
    clobber: bool = False,
    reserved: Iterable[str] = ()
) -> bool:
    """Create or replace an alias.

    Returns:
        True if an existing alias was replaced
    """
    if name in set(reserved):
        raise GhcError(f'could not create alias: "{name}" is already a ghc command')
    existed = store.contains(name)
    if existed and not clobber:
        raise GhcError(f'could not create alias: "{name}" already exists. Use --clobber to overwrite')

    store.set_alias(name, expansion)
    verb = "Changed" if existed else "Added"
    console.print(f"[green]✓[/green] {verb} alias {name}")
    return existed


def list_aliases(console: Console, store: ConfigStore) -> dict[str, str]:
    aliases = store.aliases()
    if not aliases:
        console.print("no aliases configured")
        return aliases

    table = Table(show_header=False, box=None)
    table.add_column("Name")
    table.add_column("Expansion")
    for name in sorted(aliases):
        table.add_row(f"{name}:", aliases[name])
    console.print(table)
    return aliases


def delete_alias(console: Console, store: ConfigStore, name: str) -> str:
    expansion = store.delete_alias(name)
    if expansion is None:
        raise GhcError(f'no such alias "{name}"')
    console.print(f"[green]✓[/green] Deleted alias {name}; was {expansion}")
    return expansion


def delete_all_aliases(console: Console, store: ConfigStore) -> list[str]:
    names = sorted(store.aliases())
    if not names:
        raise GhcError("no aliases configured")
    for name in names:
        delete_alias(console, store, name)
    return names
