# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy for client construction."""

from __future__ import annotations


class ClientError(Exception):
    """Base class for failures while building the API client."""


class CertReadError(ClientError):
    """The custom CA bundle could not be read or held no usable certificate."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"error reading cert file {path!r}: {reason}")
        self.path = path


class CertPoolError(ClientError):
    """The baseline system trust store could not be loaded."""


class ClientInitError(ClientError):
    """The API client handle could not be constructed (e.g. malformed base URL)."""

    def __init__(self, message: str, base_url: str | None = None):
        super().__init__(f"failed to initialize GitLab client: {message}")
        self.base_url = base_url


__all__ = ["CertPoolError", "CertReadError", "ClientError", "ClientInitError"]
