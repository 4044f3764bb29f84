# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Central configuration module for FsActor.

Defines Pydantic models for config.json and provides load / save
helpers with a module-level singleton cache.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from fsactor.exceptions import ConfigNotFoundError, ConfigValidationError
from fsactor.schemas import KNOWN_CAPABILITIES, InstanceName, Session

logger = logging.getLogger("fsactor.config")

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class SystemConfig(BaseModel):
    log_level: str = "INFO"
    json_logs: bool = True


class SessionDefaults(BaseModel):
    """Values a freshly initialised session starts with."""

    base_path: str = "."
    permissions: list[str] = ["read", "write"]
    instance_name: InstanceName = None

    @field_validator("permissions")
    @classmethod
    def _known_capabilities(cls, value: list[str]) -> list[str]:
        unknown = sorted(set(value) - KNOWN_CAPABILITIES)
        if unknown:
            raise ValueError(f"unknown capabilities: {', '.join(unknown)}")
        return value

    def new_session(self) -> Session:
        return Session(
            base_path=self.base_path,
            permissions=list(self.permissions),
            instance_name=self.instance_name,
        )


class ExecutorConfig(BaseModel):
    sandbox_root: str | None = None  # None = current working directory
    allow_parent_segments: bool = False


class StoreConfig(BaseModel):
    """Where the chain store is reached and how failures are retried."""

    base_url: str = "http://localhost:18600"
    request_path: str = "/stores/{handle}/requests"
    timeout: float = 30.0
    max_retries: int = 0  # 0 = single round trip
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0

    @model_validator(mode="after")
    def _validate(self) -> StoreConfig:
        if "{handle}" not in self.request_path:
            raise ValueError("store.request_path must contain '{handle}'")
        if self.max_retries < 0:
            raise ValueError("store.max_retries must be >= 0")
        return self


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 18610


class FsActorConfig(BaseModel):
    version: int = 1
    system: SystemConfig = SystemConfig()
    session: SessionDefaults = SessionDefaults()
    executor: ExecutorConfig = ExecutorConfig()
    store: StoreConfig = StoreConfig()
    server: ServerConfig = ServerConfig()
    render_html: bool = True


# ---------------------------------------------------------------------------
# Singleton cache
# ---------------------------------------------------------------------------

# (config, path it came from, mtime of that path when loaded)
_cached: tuple[FsActorConfig, Path, float] | None = None


def invalidate_cache() -> None:
    """Forget the cached configuration."""
    global _cached
    _cached = None


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


def _remember(config: FsActorConfig, path: Path) -> FsActorConfig:
    global _cached
    _cached = (config, path, _mtime(path))
    return config


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def get_config_path(data_dir: Path | None = None) -> Path:
    """Return the path to config.json inside *data_dir*."""
    if data_dir is None:
        from fsactor.paths import get_data_dir

        data_dir = get_data_dir()
    return data_dir / "config.json"


# ---------------------------------------------------------------------------
# Load / Save
# ---------------------------------------------------------------------------


def _read(path: Path) -> FsActorConfig:
    try:
        raw: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        return FsActorConfig.model_validate(raw)
    except json.JSONDecodeError as exc:
        logger.error("config_parse_failed path=%s error=%s", path, exc)
        raise ConfigValidationError(f"Invalid JSON in {path}: {exc}") from exc
    except ValidationError as exc:
        logger.error("config_invalid path=%s errors=%d", path, exc.error_count())
        raise ConfigValidationError(f"Invalid config in {path}: {exc}") from exc


def load_config(path: Path | None = None, *, required: bool = False) -> FsActorConfig:
    """Return the configuration stored at *path* (default: data dir).

    The parsed result is cached per path and reused until the file's mtime
    changes.  A missing file yields the defaults unless *required* is set.

    Raises:
        ConfigNotFoundError: *required* is set and the file does not exist.
        ConfigValidationError: The file is not valid JSON or does not
            match the schema.
    """
    path = path or get_config_path()
    if required and not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    if _cached is not None:
        config, cached_path, cached_mtime = _cached
        if cached_path == path and _mtime(path) == cached_mtime:
            return config

    if path.is_file():
        logger.debug("Loading config from %s", path)
        return _remember(_read(path), path)
    logger.info("No config at %s; using defaults", path)
    return _remember(FsActorConfig(), path)


def save_config(config: FsActorConfig, path: Path | None = None) -> None:
    """Write *config* as indented JSON readable by the owner only."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2) + "\n", encoding="utf-8")
    try:
        os.chmod(path, 0o600)
    except OSError:
        logger.debug("Could not chmod %s", path, exc_info=True)
    _remember(config, path)


def resolve_log_level(config: FsActorConfig) -> str:
    """Return the effective log level (``FSACTOR_LOG_LEVEL`` wins)."""
    return os.environ.get("FSACTOR_LOG_LEVEL") or config.system.log_level
