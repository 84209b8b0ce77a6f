# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for labclient."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from .version import __version__

DEFAULT_USER_AGENT = f"labclient/{__version__} (GitLab CLI)"
DEFAULT_PROTOCOL = "https"

_TRUTHY = {"true", "1"}


def is_truthy(value: str | None) -> bool:
    """Config-store booleans: only "true" and "1" count as set."""
    return (value or "").strip() in _TRUTHY


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass
class ClientSettings:
    """Defaults applied to a fresh ClientState."""

    protocol: str = DEFAULT_PROTOCOL
    user_agent: str = DEFAULT_USER_AGENT
    http2: bool = True
    # Seconds for read/write/pool; 0 disables the limit.
    request_timeout: float = 0.0

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Create settings from environment variables (evaluated at call time)."""
        return cls(
            protocol=_str_env("LABCLIENT_PROTOCOL", cls.protocol).lower(),
            user_agent=_str_env("LABCLIENT_USER_AGENT", cls.user_agent),
            http2=_bool_env("LABCLIENT_HTTP2", cls.http2),
            request_timeout=max(0.0, _float_env("LABCLIENT_REQUEST_TIMEOUT", cls.request_timeout)),
        )


def load_client_settings() -> ClientSettings:
    """Load client settings from environment with sensible defaults."""
    return ClientSettings.from_env()


class ConfigStore(Protocol):
    """Per-host key/value lookup (token, skip_tls_verify, ca_cert)."""

    def get(self, host: str, key: str) -> str | None: ...


@dataclass
class MappingConfig:
    """ConfigStore backed by a nested ``{host: {key: value}}`` mapping."""

    hosts: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def get(self, host: str, key: str) -> str | None:
        values = self.hosts.get(host) or {}
        value = values.get(key)
        return None if value is None else str(value)


class EnvConfig:
    """
    ConfigStore reading the same keys for every host from the environment.

    GITLAB_TOKEN, GITLAB_SKIP_TLS_VERIFY and GITLAB_CA_CERT map to
    token, skip_tls_verify and ca_cert.
    """

    _ENV_KEYS = {
        "token": ("GITLAB_TOKEN", "GITLAB_ACCESS_TOKEN"),
        "skip_tls_verify": ("GITLAB_SKIP_TLS_VERIFY",),
        "ca_cert": ("GITLAB_CA_CERT",),
    }

    def get(self, host: str, key: str) -> str | None:  # noqa: ARG002
        for name in self._ENV_KEYS.get(key, ()):
            value = os.getenv(name)
            if value:
                return value
        return None


class ChainConfig:
    """ConfigStore returning the first non-empty value among ``stores``."""

    def __init__(self, *stores: ConfigStore):
        self.stores = stores

    def get(self, host: str, key: str) -> str | None:
        for store in self.stores:
            value = store.get(host, key)
            if value:
                return value
        return None


__all__ = [
    "ChainConfig",
    "ClientSettings",
    "ConfigStore",
    "DEFAULT_PROTOCOL",
    "DEFAULT_USER_AGENT",
    "EnvConfig",
    "MappingConfig",
    "is_truthy",
    "load_client_settings",
]
