from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""File-backed persistence of actor sessions for the bundled hosts.

Each session lives in ``<sessions_dir>/<name>.json``.  Writes go through a
temp file + rename so a crash never leaves a half-written session behind.
"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from fsactor.exceptions import SessionCorruptedError, SessionError, SessionNotFoundError
from fsactor.schemas import SAFE_NAME_RE, Session

logger = logging.getLogger("fsactor.session_store")


def validate_session_name(name: str) -> None:
    """Raise :class:`SessionError` unless *name* is a safe file stem."""
    if not SAFE_NAME_RE.match(name):
        raise SessionError(
            f"Invalid session name: {name!r} "
            "(must be lowercase alphanumeric, start with a letter, max 31 chars)"
        )


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """Write *payload* to *path* atomically (temp + fsync + rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            logger.debug("Failed to unlink temp file %s", tmp_path, exc_info=True)
        raise


class SessionStore:
    """Load and save named sessions below *sessions_dir*."""

    def __init__(self, sessions_dir: Path) -> None:
        self._dir = sessions_dir

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, name: str) -> Path:
        validate_session_name(name)
        return self._dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def load(self, name: str) -> Session:
        path = self.path_for(name)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            raise SessionNotFoundError(f"Session not found: {name}") from None
        try:
            return Session.from_bytes(raw)
        except ValidationError as e:
            logger.error("Corrupted session file %s: %s", path, e)
            raise SessionCorruptedError(f"Session '{name}' is corrupted") from e

    def save(self, name: str, session: Session) -> None:
        path = self.path_for(name)
        atomic_write_bytes(path, session.to_bytes())
        logger.debug("Session saved name=%s bound=%s", name, session.is_bound)

    def create(self, name: str, session: Session) -> Session:
        """Persist a new session; raises :class:`SessionError` if *name* exists."""
        if self.exists(name):
            raise SessionError(f"Session already exists: {name}")
        self.save(name, session)
        logger.info("Session created name=%s", name)
        return session

    def list_names(self) -> list[str]:
        if not self._dir.is_dir():
            return []
        return sorted(
            p.stem for p in self._dir.glob("*.json")
            if SAFE_NAME_RE.match(p.stem)
        )
