# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from labclient import client as client_module

_ENV_VARS = (
    "GITLAB_HOST",
    "GITLAB_URI",
    "GL_HOST",
    "GITLAB_TOKEN",
    "GITLAB_ACCESS_TOKEN",
    "GITLAB_SKIP_TLS_VERIFY",
    "GITLAB_CA_CERT",
    "LABCLIENT_PROTOCOL",
    "LABCLIENT_USER_AGENT",
    "LABCLIENT_HTTP2",
)


@pytest.fixture(autouse=True)
def clean_client_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(client_module, "_current", None)
    yield
    state = client_module._current
    if state is not None:
        state.close()


class TransportRecorder:
    """Stands in for build_transport and counts invocations."""

    def __init__(self, handler=None):
        self.handler = handler or (lambda request: httpx.Response(200, json={}))
        self.policies = []
        self.clients = []

    def __call__(self, policy, options=None):  # noqa: ARG002
        self.policies.append(policy)
        client = httpx.Client(transport=httpx.MockTransport(self.handler))
        self.clients.append(client)
        return client

    @property
    def calls(self) -> int:
        return len(self.policies)


@pytest.fixture
def recorder(monkeypatch):
    rec = TransportRecorder()
    monkeypatch.setattr("labclient.state.build_transport", rec)
    return rec


@pytest.fixture
def make_mock_client():
    created = []

    def factory(handler=None) -> httpx.Client:
        handler = handler or (lambda request: httpx.Response(200, json={}))
        client = httpx.Client(transport=httpx.MockTransport(handler))
        created.append(client)
        return client

    yield factory
    for client in created:
        client.close()
