# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_hosts.py

import doctest

import pytest

from ghc.auth import hosts
from ghc.auth.environment import MappingEnvironment


def test_doctests():
    result = doctest.testmod(hosts)
    assert result.failed == 0


class TestNormalize:
    @pytest.mark.parametrize("raw, expected", [
        ("github.com", "github.com"),
        ("GITHUB.COM", "github.com"),
        ("  ghe.example.com\n", "ghe.example.com"),
        ("https://github.com/cli/cli", "github.com"),
        ("ssh://git@github.com/cli/cli.git", "github.com"),
        ("", ""),
    ])
    def test_canonical_form(self, raw, expected):
        assert hosts.normalize(raw) == expected


class TestGistFallback:
    def test_gist_host_falls_back_to_parent(self):
        assert hosts.gist_fallback("gist.github.com") == "github.com"
        assert list(hosts.candidates("GIST.github.com")) == ["gist.github.com", "github.com"]

    def test_plain_host_has_single_candidate(self):
        assert list(hosts.candidates("github.com")) == ["github.com"]

    def test_bare_prefix_is_not_a_gist_host(self):
        assert hosts.gist_fallback("gist.") is None


class TestDefaultHost:
    def test_primary_host_when_nothing_stored(self):
        assert hosts.default_host([], MappingEnvironment()) == "github.com"

    def test_primary_host_preferred_when_stored(self):
        stored = ["ghe.example.com", "github.com"]
        assert hosts.default_host(stored, MappingEnvironment()) == "github.com"

    def test_first_stored_host_otherwise(self):
        assert hosts.default_host(["ghe.example.com"], MappingEnvironment()) == "ghe.example.com"

    def test_gh_host_overrides(self):
        env = MappingEnvironment({"GH_HOST": "GHE.Example.com"})
        assert hosts.default_host(["github.com"], env) == "ghe.example.com"


class TestInstanceKinds:
    @pytest.mark.parametrize("host, github_com, ghe_com, enterprise", [
        ("github.com", True, False, False),
        ("github.localhost", True, False, False),
        ("tenant.ghe.com", False, True, False),
        ("ghe.example.com", False, False, True),
        ("ghe.com", False, False, True),
    ])
    def test_classification(self, host, github_com, ghe_com, enterprise):
        assert hosts.is_github_com(host) is github_com
        assert hosts.is_ghe_com(host) is ghe_com
        assert hosts.is_enterprise(host) is enterprise

    def test_api_urls(self):
        assert hosts.rest_url("GitHub.com") == "https://api.github.com/"
        assert hosts.graphql_url("github.com") == "https://api.github.com/graphql"
        assert hosts.rest_url("tenant.ghe.com") == "https://tenant.ghe.com/api/v3/"
        assert hosts.graphql_url("ghe.example.com") == "https://ghe.example.com/api/graphql"

    def test_gist_host(self):
        assert hosts.gist_host("github.com") == "gist.github.com"
        assert hosts.gist_host("ghe.example.com") == "ghe.example.com"
        assert hosts.gist_fallback(hosts.gist_host("github.com")) == "github.com"
