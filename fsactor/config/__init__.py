# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from fsactor.config.models import (
    ExecutorConfig,
    FsActorConfig,
    ServerConfig,
    SessionDefaults,
    StoreConfig,
    SystemConfig,
    get_config_path,
    invalidate_cache,
    load_config,
    resolve_log_level,
    save_config,
)

__all__ = [
    "ExecutorConfig",
    "FsActorConfig",
    "ServerConfig",
    "SessionDefaults",
    "StoreConfig",
    "SystemConfig",
    "get_config_path",
    "invalidate_cache",
    "load_config",
    "resolve_log_level",
    "save_config",
]
