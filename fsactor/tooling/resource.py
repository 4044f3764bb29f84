from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""File resources the executor runs commands against.

The executor only sees the :class:`FileResource` protocol.  Paths handed
to it are already resolved (absolute, or joined under the session's base
path).  Implementations raise :class:`FileResourceError` on failure.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from fsactor.exceptions import FileResourceError

logger = logging.getLogger("fsactor.resource")


@runtime_checkable
class FileResource(Protocol):
    def read_file(self, path: str) -> bytes: ...

    def write_file(self, path: str, content: str) -> None: ...

    def list_files(self, path: str) -> list[str]: ...

    def create_dir(self, path: str) -> None: ...

    def delete_file(self, path: str) -> None: ...


class LocalFileResource:
    """Local filesystem confined to *root*.

    Every path, absolute or relative, is interpreted under *root*; a path
    that resolves outside it (through ``..`` or a symlink) is refused.
    """

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _locate(self, path: str) -> Path:
        target = (self._root / path.lstrip("/")).resolve()
        if not target.is_relative_to(self._root):
            logger.warning("sandbox_escape root=%s path=%s", self._root, path)
            raise FileResourceError(f"Path is outside the sandbox: {path}")
        return target

    def read_file(self, path: str) -> bytes:
        target = self._locate(path)
        if not target.is_file():
            raise FileResourceError(f"File not found: {path}")
        try:
            return target.read_bytes()
        except OSError as e:
            raise FileResourceError(str(e)) from e

    def write_file(self, path: str, content: str) -> None:
        target = self._locate(path)
        if target.is_dir():
            raise FileResourceError(f"Is a directory: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FileResourceError(str(e)) from e

    def list_files(self, path: str) -> list[str]:
        target = self._locate(path)
        if not target.exists():
            raise FileResourceError(f"Directory not found: {path}")
        if not target.is_dir():
            raise FileResourceError(f"Not a directory: {path}")
        try:
            items = sorted(target.iterdir())
        except OSError as e:
            raise FileResourceError(str(e)) from e
        return [f"{item.name}/" if item.is_dir() else item.name for item in items]

    def create_dir(self, path: str) -> None:
        target = self._locate(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileResourceError(str(e)) from e

    def delete_file(self, path: str) -> None:
        target = self._locate(path)
        if target.is_dir():
            raise FileResourceError(f"Is a directory: {path}")
        try:
            target.unlink()
        except FileNotFoundError as e:
            raise FileResourceError(f"File not found: {path}") from e
        except OSError as e:
            raise FileResourceError(str(e)) from e
