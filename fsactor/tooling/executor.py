from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Permission-gated execution of extracted commands.

``OperationExecutor`` runs commands one by one against a
:class:`~fsactor.tooling.resource.FileResource`.  Every command yields
exactly one :class:`ExecutionResult`; denials, missing fields and
resource failures are recorded in the result and the batch carries on.
Nothing is rolled back.
"""

import logging
from collections.abc import Callable, Iterable

from fsactor.exceptions import FileResourceError
from fsactor.schemas import Command, ExecutionResult, OperationKind, Session
from fsactor.tooling.permissions import is_allowed
from fsactor.tooling.resource import FileResource

logger = logging.getLogger("fsactor.executor")

Handler = Callable[[Command, str], ExecutionResult]


def resolve_path(path: str, base_path: str) -> str:
    """Join *path* under *base_path* unless it is absolute.

    Purely textual: no normalisation of ``.`` or ``..`` happens here.
    """
    if path.startswith("/"):
        return path
    return f"{base_path}/{path}"


def has_parent_segment(path: str) -> bool:
    return ".." in path.replace("\\", "/").split("/")


def _ok(cmd: Command, message: str) -> ExecutionResult:
    return ExecutionResult(operation=cmd.operation, path=cmd.path, message=message, success=True)


def _fail(cmd: Command, error_type: str, message: str) -> ExecutionResult:
    return ExecutionResult(
        operation=cmd.operation,
        path=cmd.path,
        message=message,
        success=False,
        error_type=error_type,
    )


class OperationExecutor:
    """Execute commands for one session.

    Args:
        resource: File resource the commands act on.
        allow_parent_segments: When ``False`` (default), commands whose
            path contains a ``..`` segment are refused before any resource
            call.  ``True`` passes them through and leaves containment to
            the resource (e.g. :class:`LocalFileResource`'s sandbox root).
    """

    def __init__(self, resource: FileResource, *, allow_parent_segments: bool = False) -> None:
        self._resource = resource
        self._allow_parent_segments = allow_parent_segments
        self._dispatch: dict[OperationKind, Handler] = {
            OperationKind.READ_FILE: self._handle_read_file,
            OperationKind.WRITE_FILE: self._handle_write_file,
            OperationKind.EDIT_FILE: self._handle_edit_file,
            OperationKind.LIST_FILES: self._handle_list_files,
            OperationKind.CREATE_DIR: self._handle_create_dir,
            OperationKind.DELETE_FILE: self._handle_delete_file,
        }

    def execute(self, commands: Iterable[Command], session: Session) -> list[ExecutionResult]:
        """Run *commands* in order and return one result per command."""
        return [self.execute_one(cmd, session) for cmd in commands]

    def execute_one(self, cmd: Command, session: Session) -> ExecutionResult:
        # Checked per command against the session as it is now
        if not is_allowed(cmd.operation, session.permissions):
            logger.warning(
                "permission_denied operation=%s path=%s permissions=%s",
                cmd.operation, cmd.path, ",".join(session.permissions),
            )
            return _fail(cmd, "PermissionDenied", f"❌ Operation '{cmd.operation}' not permitted")

        if not self._allow_parent_segments and has_parent_segment(cmd.path):
            logger.warning("path_rejected operation=%s path=%s", cmd.operation, cmd.path)
            return _fail(
                cmd, "PathRejected",
                f"❌ Path '{cmd.path}' must not contain '..' segments",
            )

        handler = self._dispatch.get(cmd.kind) if cmd.kind is not None else None
        if handler is None:
            return _fail(cmd, "UnknownOperation", f"❌ Unknown operation: {cmd.operation}")

        path = resolve_path(cmd.path, session.base_path)
        try:
            return handler(cmd, path)
        except Exception as e:
            logger.exception("Unhandled error in %s path=%s", cmd.operation, cmd.path)
            return _fail(cmd, "ExecutionError", f"❌ Operation '{cmd.operation}' failed: {e}")

    # ── Handlers ──────────────────────────────────────────

    def _read_text(self, cmd: Command, path: str) -> str | ExecutionResult:
        """Read and decode *path*, or return the failure result."""
        try:
            raw = self._resource.read_file(path)
        except FileResourceError as e:
            return _fail(cmd, "ResourceError", f"❌ Failed to read file '{cmd.path}': {e}")
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return _fail(cmd, "DecodeError", f"❌ Failed to decode file content of '{cmd.path}'")

    def _handle_read_file(self, cmd: Command, path: str) -> ExecutionResult:
        text = self._read_text(cmd, path)
        if isinstance(text, ExecutionResult):
            return text
        logger.info("read_file path=%s len=%d", path, len(text))
        return _ok(cmd, f"📄 File content of '{cmd.path}':\n```\n{text}\n```")

    def _handle_write_file(self, cmd: Command, path: str) -> ExecutionResult:
        if cmd.content is None:
            return _fail(cmd, "MissingField", "❌ No content provided for write operation")
        try:
            self._resource.write_file(path, cmd.content)
        except FileResourceError as e:
            return _fail(cmd, "ResourceError", f"❌ Failed to write to file '{cmd.path}': {e}")
        logger.info("write_file path=%s len=%d", path, len(cmd.content))
        return _ok(cmd, f"✅ Successfully wrote to file '{cmd.path}'")

    def _handle_edit_file(self, cmd: Command, path: str) -> ExecutionResult:
        if cmd.old_text is None or cmd.new_text is None:
            return _fail(cmd, "MissingField", "❌ Edit operation requires both old_text and new_text")
        if not cmd.old_text:
            return _fail(cmd, "MissingField", "❌ old_text must not be empty")

        text = self._read_text(cmd, path)
        if isinstance(text, ExecutionResult):
            return text
        if cmd.old_text not in text:
            return _fail(cmd, "StringNotFound", f"❌ Text not found in file '{cmd.path}'")

        count = text.count(cmd.old_text)
        try:
            self._resource.write_file(path, text.replace(cmd.old_text, cmd.new_text))
        except FileResourceError as e:
            return _fail(cmd, "ResourceError", f"❌ Failed to write to file '{cmd.path}': {e}")
        logger.info("edit_file path=%s replacements=%d", path, count)
        return _ok(cmd, f"✅ Successfully edited file '{cmd.path}' ({count} replacement(s))")

    def _handle_list_files(self, cmd: Command, path: str) -> ExecutionResult:
        try:
            entries = self._resource.list_files(path)
        except FileResourceError as e:
            return _fail(cmd, "ResourceError", f"❌ Failed to list files in '{cmd.path}': {e}")
        logger.info("list_files path=%s entries=%d", path, len(entries))
        listing = "\n".join(f"  - {name}" for name in entries) or "  (empty directory)"
        return _ok(cmd, f"📁 Contents of '{cmd.path}':\n{listing}")

    def _handle_create_dir(self, cmd: Command, path: str) -> ExecutionResult:
        try:
            self._resource.create_dir(path)
        except FileResourceError as e:
            return _fail(cmd, "ResourceError", f"❌ Failed to create directory '{cmd.path}': {e}")
        logger.info("create_dir path=%s", path)
        return _ok(cmd, f"✅ Created directory '{cmd.path}'")

    def _handle_delete_file(self, cmd: Command, path: str) -> ExecutionResult:
        try:
            self._resource.delete_file(path)
        except FileResourceError as e:
            return _fail(cmd, "ResourceError", f"❌ Failed to delete file '{cmd.path}': {e}")
        logger.info("delete_file path=%s", path)
        return _ok(cmd, f"✅ Deleted file '{cmd.path}'")
