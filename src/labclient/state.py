# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Client state and lazy handle construction.

A ClientState stages connection identity (host, token, protocol, trust
policy, endpoint shape) and builds the ApiClient handle on first use. It is
either STALE or BUILT: every staging mutation moves it to STALE and only a
successful ``ensure_built()`` moves it to BUILT.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum

import httpx

from .config import ClientSettings, load_client_settings
from .endpoints import overridable_default, resolve_base_url
from .errors import ClientError
from .http.handle import ApiClient, AuthMode, DegradedApiClient
from .http.transport import TransportOptions, TrustPolicy, build_transport

logger = logging.getLogger(__name__)


class BuildPhase(str, Enum):
    STALE = "stale"
    BUILT = "built"


@dataclass(frozen=True)
class ClientStatus:
    """Outcome of best-effort access: Ready when ``error`` is None, Degraded otherwise."""

    handle: ApiClient
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def label(self) -> str:
        return "ready" if self.ok else "degraded"


class ClientState:
    """Connection identity plus the handle built from it."""

    def __init__(self, settings: ClientSettings | None = None):
        self._lock = threading.RLock()
        self._settings = settings or load_client_settings()
        self._transport: httpx.Client | None = None
        self._handle: ApiClient | None = None
        self._init_fields()

    def _init_fields(self) -> None:
        self.host = ""
        self._token = ""
        self._protocol = self._settings.protocol
        self.auth_mode = AuthMode.NONE
        self._trust_policy = TrustPolicy()
        self._is_graphql = False
        self._transport_override: httpx.Client | None = None
        self.phase = BuildPhase.STALE
        self.last_error: Exception | None = None

    @property
    def needs_rebuild(self) -> bool:
        return self.phase is BuildPhase.STALE

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def trust_policy(self) -> TrustPolicy:
        return self._trust_policy

    @property
    def is_graphql(self) -> bool:
        return self._is_graphql

    @property
    def transport_override(self) -> httpx.Client | None:
        return self._transport_override

    @property
    def handle(self) -> ApiClient | None:
        return self._handle

    def _mark_stale(self) -> None:
        self.phase = BuildPhase.STALE

    # -- lifecycle ---------------------------------------------------------

    def reset(self) -> None:
        """Return to defaults, dropping the handle, owned transport and override."""
        with self._lock:
            self._close_owned()
            self._handle = None
            self._init_fields()

    def close(self) -> None:
        with self._lock:
            self._close_owned()
            self._handle = None
            self._mark_stale()

    def _close_owned(self) -> None:
        if self._transport is not None:
            self._transport.close()
            self._transport = None

    # -- staging -----------------------------------------------------------

    def set_host(self, host: str) -> None:
        with self._lock:
            self.host = host
            self._mark_stale()

    def set_token(self, token: str) -> None:
        with self._lock:
            self._token = token
            self._mark_stale()

    def set_protocol(self, protocol: str) -> None:
        with self._lock:
            self._protocol = protocol
            self._mark_stale()

    def set_graphql(self, is_graphql: bool) -> None:
        with self._lock:
            self._is_graphql = is_graphql
            self._mark_stale()

    def set_trust_policy(self, policy: TrustPolicy) -> None:
        with self._lock:
            self._trust_policy = policy
            self._mark_stale()

    def stage(
        self,
        host: str,
        token: str,
        *,
        trust_policy: TrustPolicy,
        is_graphql: bool,
    ) -> None:
        with self._lock:
            self.host = host
            self._token = token
            self._trust_policy = trust_policy
            self._is_graphql = is_graphql
            self._mark_stale()

    def override_transport(self, http_client: httpx.Client) -> None:
        """Route all traffic through ``http_client``; applies to a built handle at once."""
        with self._lock:
            self._transport_override = http_client
            if self._handle is not None:
                self._handle.bind_transport(http_client)

    def clear_override(self) -> None:
        with self._lock:
            self._transport_override = None
            self._mark_stale()

    # -- readers -----------------------------------------------------------

    def token(self) -> str:
        return self._token

    def protocol(self) -> str:
        return self._protocol

    def http_client(self) -> httpx.Client | None:
        """The authoritative transport: the override if set, else the owned one."""
        if self._transport_override is not None:
            return self._transport_override
        return self._transport

    # -- building ----------------------------------------------------------

    def ensure_built(self) -> ApiClient:
        """
        Build the handle if the state is stale and return it.

        On failure the previous handle is kept, the state stays STALE and the
        error propagates.
        """
        with self._lock:
            if self.phase is BuildPhase.BUILT and self._handle is not None:
                return self._handle
            try:
                return self._rebuild()
            except ClientError as exc:
                self.last_error = exc
                raise

    def _rebuild(self) -> ApiClient:
        if not self.host:
            self.host = overridable_default()
        base_url = resolve_base_url(self.host, self._protocol, self._is_graphql)

        owned: httpx.Client | None = None
        if self._transport_override is not None:
            transport = self._transport_override
        else:
            options = TransportOptions(
                http2=self._settings.http2,
                request_timeout=self._settings.request_timeout or None,
            )
            owned = transport = build_transport(self._trust_policy, options)

        auth_mode = AuthMode.PRIVATE_TOKEN if self._token else AuthMode.NONE
        try:
            handle = ApiClient(
                base_url,
                transport,
                token=self._token,
                auth_mode=auth_mode,
                user_agent=self._settings.user_agent,
            )
        except ClientError:
            if owned is not None:
                owned.close()
            raise

        if owned is not None:
            self._close_owned()
            self._transport = owned
        self._handle = handle
        self.auth_mode = auth_mode
        self.phase = BuildPhase.BUILT
        self.last_error = None
        logger.debug("Built API client for %s (auth=%s)", base_url, auth_mode.value)
        return handle

    def lab(self) -> ApiClient:
        """
        Best-effort accessor: the built handle, or a degraded placeholder.

        Construction errors are logged and kept in ``last_error`` instead of
        being raised; use ``status()`` to tell the two cases apart.
        """
        return self.status().handle

    def status(self) -> ClientStatus:
        with self._lock:
            try:
                return ClientStatus(handle=self.ensure_built())
            except ClientError as exc:
                logger.warning("API client unavailable, using degraded client: %s", exc)
                placeholder = DegradedApiClient(exc, user_agent=self._settings.user_agent)
                return ClientStatus(handle=placeholder, error=exc)

    def base_url(self) -> str:
        return self.lab().base_url


__all__ = ["BuildPhase", "ClientState", "ClientStatus"]
