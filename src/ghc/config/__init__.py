# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/config/__init__.py

"""Layered configuration: option registry, document and store."""

from .options import CONFIG_OPTIONS, ConfigOption, Scope
from .store import ConfigStore

__all__ = ["CONFIG_OPTIONS", "ConfigOption", "Scope", "ConfigStore"]
