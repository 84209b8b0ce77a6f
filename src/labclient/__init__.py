# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
labclient package entrypoint.

Bootstraps a single authenticated REST/GraphQL client for a GitLab instance:
trust policy selection, endpoint resolution and lazy handle construction on
top of an httpx transport.
"""

from .client import (
    current,
    new_client,
    new_client_from_config,
    new_client_with_custom_ca,
    reset,
)
from .config import ClientSettings, EnvConfig, MappingConfig, load_client_settings
from .errors import CertPoolError, CertReadError, ClientError, ClientInitError
from .http import ApiClient, AuthMode, DegradedApiClient, TrustMode, TrustPolicy
from .log import setup_logging
from .state import BuildPhase, ClientState, ClientStatus
from .version import __version__

__all__ = [
    "ApiClient",
    "AuthMode",
    "BuildPhase",
    "CertPoolError",
    "CertReadError",
    "ClientError",
    "ClientInitError",
    "ClientSettings",
    "ClientState",
    "ClientStatus",
    "DegradedApiClient",
    "EnvConfig",
    "MappingConfig",
    "TrustMode",
    "TrustPolicy",
    "current",
    "load_client_settings",
    "new_client",
    "new_client_from_config",
    "new_client_with_custom_ca",
    "reset",
    "setup_logging",
    "__version__",
]
