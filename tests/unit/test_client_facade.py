# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import certifi
import httpx
import pytest

from labclient import client
from labclient.config import MappingConfig
from labclient.errors import CertReadError
from labclient.http.handle import AuthMode
from labclient.http.transport import TrustMode, TrustPolicy, build_transport
from labclient.state import ClientState
from labclient.testing import new_test_client


def test_current_is_a_single_instance():
    assert client.current() is client.current()


def test_reset_then_token_is_empty(recorder):
    client.new_client("example.com", "abc123")
    assert client.token() == "abc123"

    state = client.reset()
    assert state is client.current()
    assert client.token() == ""
    assert state.auth_mode is AuthMode.NONE


def test_new_client_builds_rest_handle(recorder):
    state = client.new_client("example.com", "", allow_insecure=False, is_graphql=False)
    assert state.auth_mode is AuthMode.NONE
    assert client.base_url() == "https://example.com/api/v4/"
    assert recorder.policies == [TrustPolicy()]


def test_new_client_with_insecure_flag(recorder):
    client.new_client("example.com", "abc123", allow_insecure=True)
    assert recorder.policies[0].mode is TrustMode.SKIP_VERIFY
    assert client.current().auth_mode is AuthMode.PRIVATE_TOKEN


def test_new_client_with_missing_ca_propagates(recorder, monkeypatch):
    client.new_client("example.com", "t")
    previous = client.lab()

    monkeypatch.setattr("labclient.state.build_transport", build_transport)
    with pytest.raises(CertReadError):
        client.new_client_with_custom_ca("example.com", "t", "/nonexistent/path")
    assert client.current().needs_rebuild is True
    assert client.current().handle is previous


def test_new_client_with_custom_ca_builds():
    state = client.new_client_with_custom_ca("example.com", "t", certifi.where(), is_graphql=True)
    try:
        assert state.trust_policy.mode is TrustMode.CUSTOM_CA
        assert state.base_url() == "https://example.com/api/graphql/"
    finally:
        state.close()


def test_new_client_from_config_reads_host_keys(recorder):
    cfg = MappingConfig({"example.com": {"token": "abc", "skip_tls_verify": "1"}})
    state = client.new_client_from_config("example.com", cfg)
    assert state.token() == "abc"
    assert recorder.policies[0] == TrustPolicy(skip_verify=True)


def test_new_client_from_config_skip_verify_requires_true_or_one(recorder):
    cfg = MappingConfig({"example.com": {"skip_tls_verify": "yes"}})
    client.new_client_from_config("example.com", cfg)
    assert recorder.policies[0].mode is TrustMode.SYSTEM


def test_new_client_from_config_prefers_ca_cert(recorder):
    cfg = MappingConfig({"example.com": {"skip_tls_verify": "true", "ca_cert": "/etc/ca.pem"}})
    client.new_client_from_config("example.com", cfg)
    assert recorder.policies[0] == TrustPolicy(ca_file="/etc/ca.pem")


def test_new_client_from_config_empty_host_uses_default(recorder, monkeypatch):
    monkeypatch.setenv("GITLAB_HOST", "git.example.org")
    cfg = MappingConfig({"git.example.org": {"token": "tok"}})
    state = client.new_client_from_config("", cfg)
    assert state.host == "git.example.org"
    assert state.auth_mode is AuthMode.PRIVATE_TOKEN


def test_module_setters_act_on_current_state(recorder, make_mock_client):
    client.set_host("example.com")
    client.set_token("abc")
    client.set_protocol("http")
    client.set_graphql(False)
    client.set_trust_policy(TrustPolicy(skip_verify=True))
    assert client.protocol() == "http"
    assert client.status().ok is True
    assert client.base_url() == "http://example.com/api/v4/"

    override = make_mock_client()
    client.override_transport(override)
    assert client.http_client() is override
    assert client.lab().http_client is override

    client.clear_override()
    assert client.current().needs_rebuild is True
    assert client.http_client() is recorder.clients[0]


def test_new_test_client_routes_through_supplied_transport(recorder):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1}])

    http = httpx.Client(transport=httpx.MockTransport(handler))
    try:
        state = new_test_client(http, "abc123", "gitlab.example.com")
        projects = client.lab().get("projects").json()
    finally:
        http.close()

    assert state is client.current()
    assert projects == [{"id": 1}]
    assert recorder.calls == 0
    assert state.protocol() == "https"
    assert state.trust_policy.mode is TrustMode.SKIP_VERIFY
    assert state.auth_mode is AuthMode.PRIVATE_TOKEN
    assert str(seen[0].url) == "https://gitlab.example.com/api/v4/projects"
    assert seen[0].headers["PRIVATE-TOKEN"] == "abc123"


def test_new_test_client_on_explicit_state(make_mock_client):
    state = ClientState()
    new_test_client(make_mock_client(), "", "gitlab.example.com", is_graphql=True, state=state)
    assert state.auth_mode is AuthMode.NONE
    assert state.base_url() == "https://gitlab.example.com/api/graphql/"
    assert client._current is None
