# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport and handle exports."""

from .handle import ApiClient, AuthMode, DegradedApiClient, validate_base_url
from .transport import (
    TransportOptions,
    TrustMode,
    TrustPolicy,
    build_default,
    build_insecure,
    build_transport,
    build_with_custom_ca,
)

__all__ = [
    "ApiClient",
    "AuthMode",
    "DegradedApiClient",
    "TransportOptions",
    "TrustMode",
    "TrustPolicy",
    "build_default",
    "build_insecure",
    "build_transport",
    "build_with_custom_ca",
    "validate_base_url",
]
