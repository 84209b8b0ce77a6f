# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for labclient."""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = "WARNING"
# Transport libraries log every connection at DEBUG/INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def resolve_log_level(level: str | None = None) -> int:
    name = (level or os.getenv("LABCLIENT_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    value = getattr(logging, name, None)
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/library use."""
    effective_level = resolve_log_level(level)
    logging.basicConfig(
        level=effective_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(effective_level, logging.WARNING))


__all__ = ["resolve_log_level", "setup_logging"]
