# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Host and base URL resolution.

Pure functions mapping a repository host plus protocol onto the REST or
GraphQL base URL. The default host can be overridden from the environment.
"""

from __future__ import annotations

import os

DEFAULT_HOSTNAME = "gitlab.com"
_HOST_ENV_VARS = ("GITLAB_HOST", "GITLAB_URI", "GL_HOST")


def default_hostname() -> str:
    return DEFAULT_HOSTNAME


def overridable_default() -> str:
    """Return the default host, honouring GITLAB_HOST / GITLAB_URI / GL_HOST."""
    for name in _HOST_ENV_VARS:
        value = (os.getenv(name) or "").strip()
        if value:
            return _strip_scheme(value)
    return DEFAULT_HOSTNAME


def _strip_scheme(value: str) -> str:
    for prefix in ("https://", "http://"):
        if value.lower().startswith(prefix):
            value = value[len(prefix) :]
    return value.rstrip("/")


def normalize_hostname(host: str) -> str:
    hostname = host.strip().lower()
    if hostname.startswith("www."):
        hostname = hostname[len("www.") :]
    return hostname


def is_self_hosted(host: str) -> bool:
    return normalize_hostname(host) != DEFAULT_HOSTNAME


def api_endpoint(host: str, protocol: str) -> str:
    """REST v4 base URL for ``host``."""
    if is_self_hosted(host):
        return f"{protocol}://{host}/api/v4/"
    return f"https://{DEFAULT_HOSTNAME}/api/v4/"


def graphql_endpoint(host: str, protocol: str) -> str:
    """GraphQL base URL for ``host``."""
    if is_self_hosted(host):
        return f"{protocol}://{host}/api/graphql/"
    return f"https://{DEFAULT_HOSTNAME}/api/graphql/"


def resolve_base_url(host: str, protocol: str, is_graphql: bool) -> str:
    host = host or overridable_default()
    if is_graphql:
        return graphql_endpoint(host, protocol)
    return api_endpoint(host, protocol)


__all__ = [
    "DEFAULT_HOSTNAME",
    "api_endpoint",
    "default_hostname",
    "graphql_endpoint",
    "is_self_hosted",
    "normalize_hostname",
    "overridable_default",
    "resolve_base_url",
]
