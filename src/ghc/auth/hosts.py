# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/ghc/auth/hosts.py

"""
Hostname resolution rules.

Resolution rules:
- Hostnames are compared in canonical form: trimmed, lowercase, no scheme,
  no userinfo, no path
- With no hostname given, the primary service host is used (GH_HOST overrides)
- gist.<host> shares the credential of <host> when it has none of its own
"""

from typing import Iterable, Iterator, Optional

from ghc.auth.environment import HOST_ENV_VAR, Environment, OsEnvironment

DEFAULT_HOST = "github.com"
LOCALHOST = "github.localhost"
GHE_COM_SUFFIX = ".ghe.com"
GIST_PREFIX = "gist."


def normalize(host: str) -> str:
    """
    Return the canonical form of a hostname or URL.

    Args:
        host: Hostname, optionally with scheme, userinfo or path

    Returns:
        Canonical hostname (may be empty)

    Examples:
        >>> normalize("  GitHub.com ")
        'github.com'
        >>> normalize("https://ghe.example.com///")
        'ghe.example.com'
        >>> normalize("https://monalisa@github.com/owner/repo.git")
        'github.com'
    """
    value = host.strip().lower()
    if "://" in value:
        value = value.split("://", 1)[1]
    value = value.split("/", 1)[0]
    if "@" in value:
        value = value.rsplit("@", 1)[1]
    return value


def gist_fallback(hostname: str) -> Optional[str]:
    """
    Return the parent host whose credential a gist host falls back to.

    Examples:
        >>> gist_fallback("gist.example.com")
        'example.com'
        >>> gist_fallback("example.com") is None
        True
    """
    host = normalize(hostname)
    if host.startswith(GIST_PREFIX) and len(host) > len(GIST_PREFIX):
        return host[len(GIST_PREFIX):]
    return None


def candidates(hostname: str) -> Iterator[str]:
    """Yield hostnames to try, in order, when resolving a credential."""
    host = normalize(hostname)
    yield host
    parent = gist_fallback(host)
    if parent:
        yield parent


def default_host(hosts: Iterable[str], environment: Optional[Environment] = None) -> str:
    """
    Pick the host used when none is specified.

    GH_HOST wins when set. Otherwise the primary host is used if it is stored
    or nothing is stored, else the first stored host.
    """
    environment = environment or OsEnvironment()
    override = environment.get(HOST_ENV_VAR)
    if override:
        return normalize(override)

    stored = [normalize(h) for h in hosts]
    if not stored or DEFAULT_HOST in stored:
        return DEFAULT_HOST
    return stored[0]


def host_prefix(hostname: str) -> str:
    """
    Return the HTTPS URL prefix git uses to match credentials for a host.

    Examples:
        >>> host_prefix("GitHub.com")
        'https://github.com'
    """
    return f"https://{normalize(hostname)}"


def is_github_com(hostname: str) -> bool:
    """
    True for the public service (and its local development host).

    Examples:
        >>> is_github_com("https://GitHub.com/")
        True
        >>> is_github_com("github.com.evil.com")
        False
    """
    return normalize(hostname) in (DEFAULT_HOST, LOCALHOST)


def is_ghe_com(hostname: str) -> bool:
    host = normalize(hostname)
    return host.endswith(GHE_COM_SUFFIX)


def is_enterprise(hostname: str) -> bool:
    """A self-hosted instance: neither the public service nor a ghe.com tenant."""
    return not is_github_com(hostname) and not is_ghe_com(hostname)


def rest_url(hostname: str) -> str:
    """
    Base URL of the REST API for a host.

    Examples:
        >>> rest_url("github.com")
        'https://api.github.com/'
        >>> rest_url("ghe.example.com")
        'https://ghe.example.com/api/v3/'
    """
    if is_github_com(hostname):
        return "https://api.github.com/"
    return f"https://{normalize(hostname)}/api/v3/"


def graphql_url(hostname: str) -> str:
    if is_github_com(hostname):
        return "https://api.github.com/graphql"
    return f"https://{normalize(hostname)}/api/graphql"


def gist_host(hostname: str) -> str:
    """Host serving gists; only the public service has a separate one."""
    if is_github_com(hostname):
        return f"{GIST_PREFIX}{DEFAULT_HOST}"
    return normalize(hostname)
