# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_cli_utils.py

"""Tests for CLI error handling helpers."""

from io import StringIO

import pytest
import typer
from rich.console import Console

from ghc.cli.utils import (
    EXIT_ERROR, EXIT_LOCK_POISONED, handle_errors, load_config_with_console, mask_token,
)
from ghc.system.exceptions import ConfigError, ConfigLockPoisoned, NoTokenFound
from ghc.system.locking import LockConflictError


@pytest.fixture
def console():
    return Console(file=StringIO(), width=200)


def output(console: Console) -> str:
    return console.file.getvalue()


class TestHandleErrors:
    def test_passes_through_without_error(self, console):
        with handle_errors(console, "testing"):
            pass
        assert output(console) == ""

    def test_poisoned_lock_exits_2(self, console):
        with pytest.raises(typer.Exit) as exc_info:
            with handle_errors(console, "testing"):
                raise ConfigLockPoisoned("holder died")
        assert exc_info.value.exit_code == EXIT_LOCK_POISONED
        assert "holder died" in output(console)

    def test_missing_token_suggests_login(self, console):
        with pytest.raises(typer.Exit) as exc_info:
            with handle_errors(console, "testing"):
                raise NoTokenFound("github.com")
        assert exc_info.value.exit_code == EXIT_ERROR
        assert "ghc auth login" in output(console)

    def test_lock_conflict(self, console):
        with pytest.raises(typer.Exit):
            with handle_errors(console, "writing configuration"):
                raise LockConflictError("config locked by process 12")
        assert "Error writing configuration: config locked by process 12" in output(console)

    def test_other_errors_propagate(self, console):
        with pytest.raises(ValueError):
            with handle_errors(console, "testing"):
                raise ValueError("not ours")


def test_load_config_reports_parse_errors(console, tmp_path, monkeypatch):
    (tmp_path / "config.yml").write_text("hosts: [unclosed")
    monkeypatch.setenv("GH_CONFIG_DIR", str(tmp_path))
    with pytest.raises(typer.Exit):
        load_config_with_console(console)
    assert "failed to parse" in output(console)


@pytest.mark.parametrize("token, masked", [
    ("gho_abc123", "gho_******"),
    ("github_pat_11AB", "***************"),
    ("plain", "*****"),
])
def test_mask_token(token, masked):
    assert mask_token(token) == masked


def test_config_error_is_reported(console):
    with pytest.raises(typer.Exit):
        with handle_errors(console, "testing"):
            raise ConfigError("bad value")
    assert "bad value" in output(console)
