# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Process-wide current client and construction entry points.

Module-level helpers act on the state returned by ``current()``. Every
entry point also accepts an explicit ``state`` so applications can own a
ClientState and pass it around instead.
"""

from __future__ import annotations

import httpx

from .config import ConfigStore, is_truthy
from .endpoints import overridable_default
from .http.handle import ApiClient
from .http.transport import TrustPolicy
from .state import ClientState, ClientStatus

_current: ClientState | None = None


def current() -> ClientState:
    """Return the live process-wide state, creating it on first use."""
    global _current
    if _current is None:
        _current = ClientState()
    return _current


def reset() -> ClientState:
    """Reinitialise the process-wide state to defaults."""
    state = current()
    state.reset()
    return state


def new_client(
    host: str,
    token: str,
    allow_insecure: bool = False,
    is_graphql: bool = False,
    *,
    state: ClientState | None = None,
) -> ClientState:
    """Stage ``host``/``token`` with system or skip-verify trust and build the handle."""
    state = state or current()
    state.stage(host, token, trust_policy=TrustPolicy(skip_verify=allow_insecure), is_graphql=is_graphql)
    state.ensure_built()
    return state


def new_client_with_custom_ca(
    host: str,
    token: str,
    ca_file: str,
    is_graphql: bool = False,
    *,
    state: ClientState | None = None,
) -> ClientState:
    """Stage ``host``/``token`` trusting ``ca_file`` on top of the system store and build the handle."""
    state = state or current()
    state.stage(host, token, trust_policy=TrustPolicy(ca_file=ca_file), is_graphql=is_graphql)
    state.ensure_built()
    return state


def new_client_from_config(
    repo_host: str,
    cfg: ConfigStore,
    is_graphql: bool = False,
    *,
    state: ClientState | None = None,
) -> ClientState:
    """Build the client from the per-host ``token``, ``skip_tls_verify`` and ``ca_cert`` keys."""
    if not repo_host:
        repo_host = overridable_default()
    token = cfg.get(repo_host, "token") or ""
    skip_tls_verify = is_truthy(cfg.get(repo_host, "skip_tls_verify"))
    ca_cert = cfg.get(repo_host, "ca_cert") or ""
    if ca_cert:
        return new_client_with_custom_ca(repo_host, token, ca_cert, is_graphql, state=state)
    return new_client(repo_host, token, skip_tls_verify, is_graphql, state=state)


def lab() -> ApiClient:
    return current().lab()


def status() -> ClientStatus:
    return current().status()


def base_url() -> str:
    return current().base_url()


def token() -> str:
    return current().token()


def protocol() -> str:
    return current().protocol()


def http_client() -> httpx.Client | None:
    return current().http_client()


def set_host(host: str) -> None:
    current().set_host(host)


def set_token(value: str) -> None:
    current().set_token(value)


def set_protocol(value: str) -> None:
    current().set_protocol(value)


def set_graphql(is_graphql: bool) -> None:
    current().set_graphql(is_graphql)


def set_trust_policy(policy: TrustPolicy) -> None:
    current().set_trust_policy(policy)


def override_transport(client: httpx.Client) -> None:
    current().override_transport(client)


def clear_override() -> None:
    current().clear_override()


__all__ = [
    "base_url",
    "clear_override",
    "current",
    "http_client",
    "lab",
    "new_client",
    "new_client_from_config",
    "new_client_with_custom_ca",
    "override_transport",
    "protocol",
    "reset",
    "set_graphql",
    "set_host",
    "set_protocol",
    "set_token",
    "set_trust_policy",
    "status",
    "token",
]
