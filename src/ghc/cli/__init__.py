# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/cli/__init__.py

"""Command Line Interface package for ghc."""

from .main import cli_main as main, app

__all__ = ['main', 'app']
