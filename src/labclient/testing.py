# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Test-harness helpers. Not for production code paths."""

from __future__ import annotations

import httpx

from .client import current
from .http.transport import TrustPolicy
from .state import ClientState


def new_test_client(
    http_client: httpx.Client,
    token: str,
    host: str,
    is_graphql: bool = False,
    *,
    state: ClientState | None = None,
) -> ClientState:
    """
    Build a client that sends every request through ``http_client``.

    TLS verification is off and the protocol is forced to https. The override
    is installed before building so no real transport is created.
    """
    state = state or current()
    state.set_protocol("https")
    state.override_transport(http_client)
    state.stage(host, token, trust_policy=TrustPolicy(skip_verify=True), is_graphql=is_graphql)
    state.ensure_built()
    return state


__all__ = ["new_test_client"]
