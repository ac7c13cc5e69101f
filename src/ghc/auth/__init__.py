# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/auth/__init__.py

"""Credential resolution and the git credential helper."""
