# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_options.py

from ghc.config.options import (
    CONFIG_OPTIONS, Scope, default_for_key, find_option,
)


class TestRegistry:
    def test_known_keys(self):
        keys = [option.key for option in CONFIG_OPTIONS]
        assert keys == ["git_protocol", "editor", "prompt", "pager", "http_unix_socket", "browser"]

    def test_defaults(self):
        assert default_for_key("git_protocol") == "https"
        assert default_for_key("prompt") == "enabled"
        assert default_for_key("editor") is None
        assert default_for_key("no_such_key") is None

    def test_allowed_values(self):
        git_protocol = find_option("git_protocol")
        assert git_protocol.allows("ssh")
        assert not git_protocol.allows("ftp")
        assert find_option("editor").allows("anything at all")

    def test_scopes(self):
        assert find_option("git_protocol").scope is Scope.HOST
        assert find_option("http_unix_socket").scope is Scope.HOST
        assert find_option("editor").scope is Scope.GLOBAL
