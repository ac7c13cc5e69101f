# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/conftest.py

"""
Shared test fixtures for the ghc test suite.

Stores are built on a MappingEnvironment so no test reads or mutates the
real process environment, and every on-disk document lives under tmp_path.
"""

from pathlib import Path

import pytest
from loguru import logger

from ghc.auth.environment import MappingEnvironment
from ghc.config.document import ConfigDocument
from ghc.config.store import ConfigStore


@pytest.fixture(autouse=True)
def quiet_logging():
    """Drop loguru handlers installed by CLI runs so tests don't leak log files."""
    yield
    logger.remove()


@pytest.fixture
def env():
    """Empty environment; tests add variables with env_with()."""
    return MappingEnvironment()


@pytest.fixture
def env_with():
    def make(**values: str) -> MappingEnvironment:
        return MappingEnvironment(values)
    return make


@pytest.fixture
def config_path(tmp_path) -> Path:
    return tmp_path / "gh" / "config.yml"


@pytest.fixture
def config_text():
    """A document with one logged-in host, a second account and an alias."""
    return """\
git_protocol: https
editor: vim
aliases:
  co: pr checkout
hosts:
  github.com:
    user: monalisa
    oauth_token: gho_monalisa
    git_protocol: ssh
    users:
      monalisa:
        oauth_token: gho_monalisa
      hubot:
        oauth_token: gho_hubot
"""


@pytest.fixture
def make_store(config_path, config_text):
    """Build a store backed by config_path, optionally seeded and with env vars."""
    def make(text: str | None = None, seed: bool = True, **env_values: str) -> ConfigStore:
        if seed:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(config_text if text is None else text)
        return ConfigStore.load(config_path, MappingEnvironment(env_values))
    return make


@pytest.fixture
def store(make_store) -> ConfigStore:
    return make_store()


@pytest.fixture
def memory_store(env) -> ConfigStore:
    return ConfigStore(ConfigDocument(), environment=env)
