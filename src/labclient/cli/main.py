# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""labclient CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

import httpx

from ..client import new_client_from_config
from ..config import ChainConfig, ClientSettings, EnvConfig, MappingConfig, load_client_settings
from ..endpoints import overridable_default
from ..errors import ClientError
from ..log import setup_logging
from ..state import ClientState


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Authenticated GitLab REST/GraphQL client")
    parser.add_argument("--host", default="", help="GitLab host (defaults to GITLAB_HOST or gitlab.com)")
    parser.add_argument("--token", default=None, help="Private token (defaults to GITLAB_TOKEN)")
    parser.add_argument("--protocol", default=None, help="URL scheme used for self-hosted instances")
    parser.add_argument("--ca-cert", default=None, help="PEM bundle trusted in addition to the system store")
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Skip TLS verification (ignored when --ca-cert is given)",
    )
    parser.add_argument("--graphql", action="store_true", help="Target the GraphQL endpoint")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of text")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LABCLIENT_LOG_LEVEL or WARNING)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("info", help="Show the resolved client configuration")
    api = sub.add_parser("api", help="Send a REST GET (or a GraphQL query with --graphql)")
    api.add_argument("path", help="REST path relative to the API root, or a GraphQL query")
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, str]:
    overrides: dict[str, str] = {}
    if args.token is not None:
        overrides["token"] = args.token
    if args.insecure:
        overrides["skip_tls_verify"] = "true"
    if args.ca_cert:
        overrides["ca_cert"] = args.ca_cert
    return overrides


def _print_json(data: Any) -> None:
    json.dump(data, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _describe(state: ClientState) -> dict[str, Any]:
    status = state.status()
    return {
        "host": state.host,
        "base_url": status.handle.base_url,
        "auth_mode": state.auth_mode.value,
        "trust": state.trust_policy.mode.value,
        "status": status.label,
    }


def _run_api(state: ClientState, args: argparse.Namespace) -> Any:
    handle = state.ensure_built()
    if args.graphql:
        response = handle.graphql_response(args.path)
    else:
        response = handle.get(args.path)
    response.raise_for_status()
    try:
        return response.json()
    except ValueError:
        return response.text


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: ClientSettings = load_client_settings()
    if args.protocol:
        settings.protocol = args.protocol.lower()

    host = args.host or overridable_default()
    cfg = ChainConfig(MappingConfig({host: _cli_overrides(args)}), EnvConfig())
    state = ClientState(settings)
    try:
        new_client_from_config(host, cfg, is_graphql=args.graphql, state=state)
        if args.command == "info":
            info = _describe(state)
            if args.json:
                _print_json(info)
            else:
                for key, value in info.items():
                    print(f"{key}: {value}")
        else:
            _print_json(_run_api(state, args))
    except ClientError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except httpx.HTTPError as exc:
        print(f"error: request failed: {exc}", file=sys.stderr)
        return 1
    finally:
        state.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
