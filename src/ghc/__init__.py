# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/__init__.py

"""ghc - command-line client core: configuration, authentication, git credentials."""
