# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_config_store.py

"""
Tests for the layered config store.

Covers lookup precedence, registry validation, scoping rules, aliases
and persistence through write() and a fresh load().
"""

import pytest

from ghc.config.options import CONFIG_OPTIONS
from ghc.config.store import ConfigStore
from ghc.system.exceptions import (
    ConfigError, ConfigKeyUnknown, ConfigValueInvalid, TokenNotWriteable,
)


class TestGet:
    def test_every_option_has_its_default_when_empty(self, memory_store):
        for option in CONFIG_OPTIONS:
            assert memory_store.get("", option.key) == option.default
            assert memory_store.get("github.com", option.key) == option.default

    def test_host_value_beats_global(self, store):
        assert store.get("github.com", "git_protocol") == "ssh"
        assert store.get("", "git_protocol") == "https"

    def test_other_host_sees_global(self, store):
        assert store.get("ghe.example.com", "git_protocol") == "https"

    def test_hostname_is_normalized(self, store):
        assert store.get("GitHub.COM", "git_protocol") == "ssh"

    def test_global_only_option_ignores_host(self, store):
        assert store.get("github.com", "editor") == "vim"

    def test_unknown_key(self, memory_store):
        assert memory_store.get("", "no_such_key") is None
        with pytest.raises(ConfigKeyUnknown, match='could not find key "no_such_key"'):
            memory_store.require("", "no_such_key")
        assert memory_store.get_or_default("", "no_such_key") == ""

    def test_credential_keys_resolve_through_auth(self, make_store):
        store = make_store(GH_TOKEN="env_token")
        assert store.get("github.com", "oauth_token") == "env_token"
        assert store.get("github.com", "user") == "x-access-token"


class TestSet:
    def test_set_global_and_host(self, memory_store):
        assert memory_store.set("", "git_protocol", "ssh") == []
        assert memory_store.set("ghe.example.com", "git_protocol", "https") == []
        assert memory_store.get("", "git_protocol") == "ssh"
        assert memory_store.get("ghe.example.com", "git_protocol") == "https"

    def test_invalid_value_lists_allowed_values(self, memory_store):
        with pytest.raises(ConfigValueInvalid) as exc_info:
            memory_store.set("", "git_protocol", "ftp")
        assert str(exc_info.value) == (
            "failed to set \"git_protocol\" to \"ftp\": valid values are 'https', 'ssh'"
        )

    def test_invalid_value_leaves_state_unchanged(self, store):
        before = store.document.model_copy(deep=True)
        with pytest.raises(ConfigValueInvalid):
            store.set("github.com", "git_protocol", "ftp")
        assert store.document == before

    def test_unknown_key_is_stored_with_warning(self, memory_store):
        warnings = memory_store.set("", "colour", "always")
        assert len(warnings) == 1
        assert "colour" in warnings[0]
        assert memory_store.get("", "colour") == "always"

    def test_global_option_rejects_host(self, memory_store):
        with pytest.raises(ConfigError, match="global setting"):
            memory_store.set("github.com", "editor", "vim")

    @pytest.mark.parametrize("key", ["aliases", "hosts", "users"])
    def test_reserved_keys(self, memory_store, key):
        with pytest.raises(ConfigError, match="reserved"):
            memory_store.set("", key, "x")

    def test_user_cannot_be_set(self, store):
        with pytest.raises(ConfigError):
            store.set("github.com", "user", "hubot")

    def test_oauth_token_for_host(self, store):
        store.set("github.com", "oauth_token", "gho_new")
        assert store.get("github.com", "oauth_token") == "gho_new"
        assert store.document.hosts["github.com"].users["monalisa"].oauth_token == "gho_new"

    def test_oauth_token_blocked_by_override(self, make_store):
        store = make_store(GITHUB_TOKEN="env_token")
        with pytest.raises(TokenNotWriteable, match="GITHUB_TOKEN"):
            store.set("github.com", "oauth_token", "gho_new")


class TestUnset:
    def test_unset_host_value_reveals_global(self, store):
        assert store.unset("github.com", "git_protocol")
        assert store.get("github.com", "git_protocol") == "https"

    def test_unset_missing_value(self, memory_store):
        assert not memory_store.unset("", "editor")

    def test_empty_host_entry_is_dropped(self, memory_store):
        memory_store.set("ghe.example.com", "git_protocol", "ssh")
        memory_store.unset("ghe.example.com", "git_protocol")
        assert "ghe.example.com" not in memory_store.document.hosts


class TestListAndHosts:
    def test_list_options(self, store):
        values = dict(store.list_options("github.com"))
        assert values["git_protocol"] == "ssh"
        assert values["editor"] == "vim"
        assert values["prompt"] == "enabled"
        assert values["pager"] == ""

    def test_hosts_with_credentials_only(self, store):
        store.set("ghe.example.com", "git_protocol", "ssh")
        assert store.hosts() == ["github.com"]


class TestAliases:
    def test_alias_lifecycle(self, memory_store):
        memory_store.set_alias("pv", "pr view")
        assert memory_store.contains("pv")
        assert memory_store.aliases() == {"pv": "pr view"}
        assert memory_store.delete_alias("pv") == "pr view"
        assert memory_store.delete_alias("pv") is None


class TestPersistence:
    def test_nothing_written_until_write(self, make_store, config_path):
        store = make_store(seed=False)
        store.set("", "editor", "vim")
        assert not config_path.exists()

    def test_write_and_reload(self, store, config_path):
        store.set("", "editor", "emacs")
        store.set_alias("pv", "pr view")
        store.write()

        reloaded = ConfigStore.load(config_path, store.environment)
        assert reloaded.get("", "editor") == "emacs"
        assert reloaded.aliases() == {"co": "pr checkout", "pv": "pr view"}
        assert reloaded.get("github.com", "oauth_token") == "gho_monalisa"

    def test_write_releases_lock_file(self, store, config_path):
        store.write()
        assert not config_path.with_name("config.yml.lock").exists()

    def test_in_memory_write_is_noop(self, memory_store):
        memory_store.set("", "editor", "vim")
        memory_store.write()
