# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/cli/commands/config.py

"""
Config command handlers.

Handles: get, set, unset, list
"""

from typing import Any, Optional

from rich.console import Console

from ghc.config.store import ConfigStore


def get(store: ConfigStore, key: str, hostname: Optional[str] = None) -> str:
    """Resolved value of key; raises ConfigKeyUnknown when there is none."""
    return store.require(hostname or "", key)


def set_value(
    console: Console,
    store: ConfigStore,
    key: str,
    value: str,
    hostname: Optional[str] = None
) -> dict[str, Any]:
    """Set a value and report registry warnings."""
    warnings = store.set(hostname or "", key, value)
    for warning in warnings:
        console.print(f"[yellow]![/yellow] warning: {warning}")
    return {"key": key, "value": value, "hostname": hostname or "", "warnings": warnings}


def unset(console: Console, store: ConfigStore, key: str, hostname: Optional[str] = None) -> bool:
    removed = store.unset(hostname or "", key)
    if not removed:
        console.print(f"[yellow]![/yellow] {key} was not set")
    return removed


def list_values(store: ConfigStore, hostname: Optional[str] = None) -> list[tuple[str, str]]:
    return store.list_options(hostname or "")
