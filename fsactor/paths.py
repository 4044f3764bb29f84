# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Centralized path resolution for FsActor.

All modules import directory paths from here instead of computing them ad-hoc.
Runtime data directory can be overridden via FSACTOR_DATA_DIR environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path


# Default runtime data directory
_DEFAULT_DATA_DIR = Path.home() / ".fsactor"


def get_data_dir() -> Path:
    """Return the runtime data directory, respecting FSACTOR_DATA_DIR env var."""
    env_val = os.environ.get("FSACTOR_DATA_DIR")
    if env_val:
        return Path(env_val).expanduser().resolve()
    return _DEFAULT_DATA_DIR


def get_sessions_dir() -> Path:
    return get_data_dir() / "sessions"


def get_logs_dir() -> Path:
    return get_data_dir() / "logs"
