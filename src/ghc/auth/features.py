# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/auth/features.py

"""Per-host API capability flags. Detection happens elsewhere; this holds the result."""

from pydantic import BaseModel, ConfigDict

from ghc.auth.hosts import normalize


class Features(BaseModel):
    """Capabilities of one service instance. Everything is off until detected."""
    model_config = ConfigDict(frozen=True)

    merge_queue: bool = False
    projects_v2: bool = False
    autolinks: bool = False


class FeatureRegistry:
    """Detected features keyed by canonical hostname."""

    def __init__(self) -> None:
        self._features: dict[str, Features] = {}

    def get(self, hostname: str) -> Features:
        return self._features.get(normalize(hostname), Features())

    def record(self, hostname: str, features: Features) -> None:
        self._features[normalize(hostname)] = features

    def forget(self, hostname: str) -> None:
        self._features.pop(normalize(hostname), None)
