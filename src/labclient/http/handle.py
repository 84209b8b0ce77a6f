# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""API client handle bound to a base URL, a transport and a user agent."""

from __future__ import annotations

from enum import Enum
from typing import Any

import httpx

from ..config import DEFAULT_USER_AGENT
from ..errors import ClientInitError

_SUPPORTED_SCHEMES = {"http", "https"}


class AuthMode(str, Enum):
    NONE = "none"
    # Reserved; the factory never derives it.
    OAUTH_TOKEN = "oauth_token"
    PRIVATE_TOKEN = "private_token"


def validate_base_url(base_url: str) -> str:
    """Return ``base_url`` with a trailing slash or raise ClientInitError."""
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ClientInitError(str(exc), base_url=base_url) from exc
    if url.scheme not in _SUPPORTED_SCHEMES:
        raise ClientInitError(f"unsupported protocol {url.scheme!r} in {base_url!r}", base_url=base_url)
    if not url.host:
        raise ClientInitError(f"missing host in {base_url!r}", base_url=base_url)
    return base_url if base_url.endswith("/") else base_url + "/"


class ApiClient:
    """Authenticated REST/GraphQL access against one GitLab instance."""

    degraded = False

    def __init__(
        self,
        base_url: str,
        http_client: httpx.Client,
        *,
        token: str = "",
        auth_mode: AuthMode = AuthMode.NONE,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self._base_url = validate_base_url(base_url)
        self._http_client = http_client
        self._token = token
        self.auth_mode = auth_mode
        self.user_agent = user_agent

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def http_client(self) -> httpx.Client:
        return self._http_client

    def bind_transport(self, http_client: httpx.Client) -> None:
        """Route subsequent requests through ``http_client``."""
        self._http_client = http_client

    def _headers(self, extra: dict[str, str] | None) -> dict[str, str]:
        headers = dict(extra or {})
        headers["User-Agent"] = self.user_agent
        if self._token and self.auth_mode is AuthMode.PRIVATE_TOKEN:
            headers.setdefault("PRIVATE-TOKEN", self._token)
        elif self._token and self.auth_mode is AuthMode.OAUTH_TOKEN:
            headers.setdefault("Authorization", f"Bearer {self._token}")
        return headers

    def url_for(self, path: str) -> str:
        return self._base_url + path.lstrip("/")

    def request(
        self,
        method: str,
        path: str = "",
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return self._http_client.request(
            method,
            self.url_for(path),
            params=params,
            json=json,
            headers=self._headers(headers),
        )

    def get(self, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        return self.request("GET", path, params=params)

    def post(self, path: str, *, json: Any = None) -> httpx.Response:
        return self.request("POST", path, json=json)

    def graphql_response(self, query: str, variables: dict[str, Any] | None = None) -> httpx.Response:
        """POST a GraphQL document to the base URL."""
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        return self.request("POST", "", json=payload)

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST a GraphQL document and return the decoded JSON body."""
        response = self.graphql_response(query, variables)
        response.raise_for_status()
        return response.json()


class DegradedApiClient(ApiClient):
    """
    Placeholder handed out when the real handle could not be built.

    It has no base URL; every request raises ClientInitError chained to the
    original build failure.
    """

    degraded = True

    def __init__(self, error: Exception, *, user_agent: str = DEFAULT_USER_AGENT):
        self._base_url = ""
        self._http_client = None  # type: ignore[assignment]
        self._token = ""
        self.auth_mode = AuthMode.NONE
        self.user_agent = user_agent
        self.error = error

    def bind_transport(self, http_client: httpx.Client) -> None:  # noqa: ARG002
        return None

    def request(self, method: str, path: str = "", **kwargs: Any) -> httpx.Response:  # noqa: ARG002
        raise ClientInitError(f"client unavailable ({self.error})") from self.error


__all__ = ["ApiClient", "AuthMode", "DegradedApiClient", "validate_base_url"]
