# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import httpx

from labclient.cli.main import build_parser, main


def test_build_parser_parses_global_options():
    args = build_parser().parse_args(["--host", "example.com", "--insecure", "--json", "api", "projects"])
    assert args.host == "example.com"
    assert args.insecure is True
    assert args.json is True
    assert args.command == "api"
    assert args.path == "projects"


def test_info_json_output(recorder, capsys):
    code = main(["--host", "example.com", "--token", "abc123", "--json", "info"])
    assert code == 0
    info = json.loads(capsys.readouterr().out)
    assert info == {
        "host": "example.com",
        "base_url": "https://example.com/api/v4/",
        "auth_mode": "private_token",
        "trust": "system",
        "status": "ready",
    }
    assert recorder.clients[0].is_closed is True


def test_info_text_output_uses_env_token(recorder, capsys, monkeypatch):
    monkeypatch.setenv("GITLAB_TOKEN", "env-token")
    assert main(["--host", "example.com", "--insecure", "--graphql", "info"]) == 0
    out = capsys.readouterr().out
    assert "base_url: https://example.com/api/graphql/" in out
    assert "auth_mode: private_token" in out
    assert "trust: skip_verify" in out


def test_api_get_prints_json(recorder, capsys):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"version": "16.0.0"})

    recorder.handler = handler
    assert main(["--host", "example.com", "api", "version"]) == 0
    assert json.loads(capsys.readouterr().out) == {"version": "16.0.0"}
    assert str(seen[0].url) == "https://example.com/api/v4/version"


def test_api_graphql_query(recorder, capsys):
    recorder.handler = lambda request: httpx.Response(200, json={"data": {"echo": "hi"}})
    assert main(["--host", "example.com", "--graphql", "api", "query { echo }"]) == 0
    assert json.loads(capsys.readouterr().out) == {"data": {"echo": "hi"}}


def test_api_http_error_returns_one(recorder, capsys):
    recorder.handler = lambda request: httpx.Response(404, json={"message": "404 Not found"})
    assert main(["--host", "example.com", "api", "projects/999"]) == 1
    assert "request failed" in capsys.readouterr().err


def test_missing_ca_cert_returns_one(capsys):
    assert main(["--host", "example.com", "--ca-cert", "/nonexistent/ca.pem", "info"]) == 1
    assert "error reading cert file" in capsys.readouterr().err


def test_api_graphql_non_json_body_prints_text(recorder, capsys):
    recorder.handler = lambda request: httpx.Response(200, text="<html>maintenance</html>")
    assert main(["--host", "example.com", "--graphql", "api", "query { echo }"]) == 0
    assert json.loads(capsys.readouterr().out) == "<html>maintenance</html>"


def test_empty_ca_cert_returns_one(tmp_path, capsys):
    empty = tmp_path / "empty.pem"
    empty.write_text("", encoding="utf-8")
    assert main(["--host", "example.com", "--ca-cert", str(empty), "info"]) == 1
    assert "no usable PEM certificate" in capsys.readouterr().err
