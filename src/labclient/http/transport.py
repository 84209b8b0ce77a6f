# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Transport construction for the three TLS trust policies.

Every transport shares the same connection settings; only certificate
verification differs. Transports are ``httpx.Client`` instances so proxies
are picked up from the environment.
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import certifi
import httpx

from ..errors import CertPoolError, CertReadError

logger = logging.getLogger(__name__)

DIAL_TIMEOUT = 30.0
TLS_HANDSHAKE_TIMEOUT = 10.0
IDLE_CONN_TIMEOUT = 90.0
MAX_IDLE_CONNS = 100


class TrustMode(str, Enum):
    SYSTEM = "system"
    SKIP_VERIFY = "skip_verify"
    CUSTOM_CA = "custom_ca"


@dataclass(frozen=True)
class TrustPolicy:
    """Which certificate authorities a transport accepts."""

    skip_verify: bool = False
    ca_file: str | None = None

    @property
    def mode(self) -> TrustMode:
        # A staged CA bundle wins over skip-verify.
        if self.ca_file:
            return TrustMode.CUSTOM_CA
        if self.skip_verify:
            return TrustMode.SKIP_VERIFY
        return TrustMode.SYSTEM

    @property
    def is_ambiguous(self) -> bool:
        return bool(self.ca_file) and self.skip_verify


@dataclass(frozen=True)
class TransportOptions:
    dial_timeout: float = DIAL_TIMEOUT
    tls_handshake_timeout: float = TLS_HANDSHAKE_TIMEOUT
    idle_timeout: float = IDLE_CONN_TIMEOUT
    max_idle_conns: int = MAX_IDLE_CONNS
    http2: bool = True
    # Read/write/pool limit; None waits indefinitely.
    request_timeout: float | None = None

    def timeout(self) -> httpx.Timeout:
        # httpx folds the TLS handshake into the connect phase.
        connect = max(self.dial_timeout, self.tls_handshake_timeout)
        return httpx.Timeout(self.request_timeout, connect=connect)

    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=None,
            max_keepalive_connections=self.max_idle_conns,
            keepalive_expiry=self.idle_timeout,
        )


def _new_client(verify: ssl.SSLContext | bool, options: TransportOptions | None) -> httpx.Client:
    options = options or TransportOptions()
    return httpx.Client(
        verify=verify,
        http2=options.http2,
        timeout=options.timeout(),
        limits=options.limits(),
        trust_env=True,
    )


def build_default(options: TransportOptions | None = None) -> httpx.Client:
    """
    Transport using the default trust store.

    That store is httpx's certifi bundle, not the operating system store: a CA
    installed only at the OS level is not trusted. Use build_with_custom_ca for it.
    """
    logger.debug("Building transport with system trust")
    return _new_client(True, options)


def build_insecure(options: TransportOptions | None = None) -> httpx.Client:
    """Transport with certificate verification disabled."""
    logger.debug("Building transport with TLS verification disabled")
    return _new_client(False, options)


def _system_trust_context() -> ssl.SSLContext:
    try:
        return ssl.create_default_context(cafile=certifi.where())
    except (OSError, ssl.SSLError) as exc:
        raise CertPoolError(f"unable to load system certificate pool: {exc}") from exc


def build_with_custom_ca(path: str, options: TransportOptions | None = None) -> httpx.Client:
    """
    Transport trusting the system store plus the PEM certificates in ``path``.

    Raises CertReadError when the file cannot be read or contains no
    certificate, CertPoolError when the baseline store is unavailable.
    """
    try:
        pem = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CertReadError(path, str(exc)) from exc

    context = _system_trust_context()
    try:
        context.load_verify_locations(cadata=pem)
    except (ssl.SSLError, ValueError) as exc:
        # ValueError: empty file.
        raise CertReadError(path, f"no usable PEM certificate ({exc})") from exc

    logger.debug("Building transport trusting custom CA %s", path)
    return _new_client(context, options)


def build_transport(policy: TrustPolicy, options: TransportOptions | None = None) -> httpx.Client:
    """Build a transport for ``policy``; exactly one builder runs."""
    mode = policy.mode
    if policy.is_ambiguous:
        logger.warning(
            "Both ca_cert and skip_tls_verify are set; verifying against %s and ignoring skip_tls_verify",
            policy.ca_file,
        )
    if mode is TrustMode.CUSTOM_CA:
        return build_with_custom_ca(policy.ca_file or "", options)
    if mode is TrustMode.SKIP_VERIFY:
        return build_insecure(options)
    return build_default(options)


__all__ = [
    "DIAL_TIMEOUT",
    "IDLE_CONN_TIMEOUT",
    "MAX_IDLE_CONNS",
    "TLS_HANDSHAKE_TIMEOUT",
    "TransportOptions",
    "TrustMode",
    "TrustPolicy",
    "build_default",
    "build_insecure",
    "build_transport",
    "build_with_custom_ca",
]
