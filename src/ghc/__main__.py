# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/__main__.py

from ghc.cli import main

main()
