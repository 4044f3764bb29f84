from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Unified exception hierarchy for FsActor.

All domain-specific exceptions derive from :class:`FsActorError`,
enabling callers to catch the entire family with a single clause::

    try:
        ...
    except FsActorError as e:
        logger.error("Domain error: %s", e)

Malformed command markup never raises (blocks are skipped), and
permission denials are reported as execution results, so neither has
an exception class here.
"""


class FsActorError(Exception):
    """Base exception for all FsActor errors."""


# ── Tooling ──────────────────────────────────────────────────


class ToolingError(FsActorError):
    """Command execution errors."""


class FileResourceError(ToolingError):
    """A file-resource call failed (read, write, list, mkdir, delete)."""


# ── Store / chain ────────────────────────────────────────────


class StoreError(FsActorError):
    """A chain entry could not be retrieved or decoded."""


class StoreNotConfiguredError(StoreError):
    """No store handle is bound to the session yet."""


class StoreTransportError(StoreError):
    """Transport failure while talking to the store (network, HTTP status)."""

    def __init__(self, message: str = "Store transport failed", *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreDecodeError(StoreError):
    """The store replied, but the envelope or entry could not be decoded."""


# ── Protocol ─────────────────────────────────────────────────


class ProtocolError(FsActorError):
    """Malformed inbound envelope or persisted state."""


# ── Session persistence ──────────────────────────────────────


class SessionError(FsActorError):
    """Session persistence errors."""


class SessionNotFoundError(SessionError):
    """Referenced session does not exist."""


class SessionCorruptedError(SessionError):
    """Persisted session could not be decoded."""


# ── Configuration ────────────────────────────────────────────


class ConfigError(FsActorError):
    """Configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Configuration file not found."""


class ConfigValidationError(ConfigError):
    """Configuration validation failure."""
