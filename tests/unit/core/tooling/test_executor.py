"""Unit tests for OperationExecutor: permission gating, path handling and per-operation results."""
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from fsactor.schemas import Command, Session
from fsactor.tooling.executor import OperationExecutor, has_parent_segment, resolve_path
from tests.helpers.fakes import FakeFileResource

RW = Session(child_id="c1", store_id="s1", permissions=["read", "write"])
RO = Session(child_id="c1", store_id="s1", permissions=["read"])


def _make_executor(files: dict | None = None, **kwargs) -> tuple[OperationExecutor, FakeFileResource]:
    resource = FakeFileResource(files)
    return OperationExecutor(resource, **kwargs), resource


# ── Path helpers ──────────────────────────────────────────


class TestResolvePath:
    def test_relative_path_joined_under_base(self):
        assert resolve_path("notes.txt", ".") == "./notes.txt"

    def test_absolute_path_used_as_is(self):
        assert resolve_path("/etc/hosts", "/srv/data") == "/etc/hosts"

    def test_no_normalisation(self):
        assert resolve_path("a/./b", "base") == "base/a/./b"

    @pytest.mark.parametrize("path, expected", [
        ("../x", True),
        ("a/../b", True),
        ("a\\..\\b", True),
        ("..", True),
        ("a/..b", False),
        ("...", False),
        ("plain.txt", False),
    ])
    def test_has_parent_segment(self, path, expected):
        assert has_parent_segment(path) is expected


# ── Permission gate ───────────────────────────────────────


class TestPermissionGate:
    def test_write_denied_with_read_only(self):
        executor, resource = _make_executor()
        [result] = executor.execute([Command(operation="write-file", path="a.txt", content="x")], RO)
        assert result.success is False
        assert result.error_type == "PermissionDenied"
        assert result.message == "❌ Operation 'write-file' not permitted"
        assert resource.calls == []

    def test_unknown_operation_denied(self):
        executor, resource = _make_executor()
        [result] = executor.execute([Command(operation="chmod", path="a")], RW)
        assert result.error_type == "PermissionDenied"
        assert "not permitted" in result.message
        assert resource.calls == []

    def test_denial_is_logged(self, caplog):
        executor, _ = _make_executor()
        with caplog.at_level("WARNING", logger="fsactor.executor"):
            executor.execute([Command(operation="delete-file", path="a.txt")], RO)
        assert "permission_denied" in caplog.text

    def test_batch_continues_after_denial(self):
        executor, resource = _make_executor({"./a.txt": "hi"})
        results = executor.execute([
            Command(operation="write-file", path="a.txt", content="x"),
            Command(operation="read-file", path="a.txt"),
        ], RO)
        assert [r.success for r in results] == [False, True]
        assert resource.ops() == ["read_file"]


# ── Parent segments ───────────────────────────────────────


class TestParentSegments:
    def test_rejected_by_default(self):
        executor, resource = _make_executor()
        [result] = executor.execute([Command(operation="read-file", path="../secret")], RW)
        assert result.error_type == "PathRejected"
        assert resource.calls == []

    def test_permission_checked_before_path(self):
        executor, _ = _make_executor()
        [result] = executor.execute([Command(operation="write-file", path="../x", content="")], RO)
        assert result.error_type == "PermissionDenied"

    def test_passed_through_when_allowed(self):
        executor, resource = _make_executor({"./../secret": "s"}, allow_parent_segments=True)
        [result] = executor.execute([Command(operation="read-file", path="../secret")], RW)
        assert result.success is True
        assert resource.calls == [("read_file", "./../secret")]


# ── Operations ────────────────────────────────────────────


class TestReadFile:
    def test_success(self):
        executor, _ = _make_executor({"./a.txt": "hello"})
        [result] = executor.execute([Command(operation="read-file", path="a.txt")], RO)
        assert result.success is True
        assert result.message == "📄 File content of 'a.txt':\n```\nhello\n```"

    def test_missing_file(self):
        executor, _ = _make_executor()
        [result] = executor.execute([Command(operation="read-file", path="nope.txt")], RO)
        assert result.error_type == "ResourceError"
        assert result.message.startswith("❌ Failed to read file 'nope.txt'")

    def test_undecodable_content(self):
        executor, _ = _make_executor({"./bin": b"\xff\xfe\x00"})
        [result] = executor.execute([Command(operation="read-file", path="bin")], RO)
        assert result.error_type == "DecodeError"

    def test_base_path_applied(self):
        executor, resource = _make_executor({"/srv/a.txt": "x"})
        session = RW.model_copy(update={"base_path": "/srv"})
        executor.execute([Command(operation="read-file", path="a.txt")], session)
        assert resource.calls == [("read_file", "/srv/a.txt")]


class TestWriteFile:
    def test_success(self):
        executor, resource = _make_executor()
        [result] = executor.execute([Command(operation="write-file", path="a.txt", content="data")], RW)
        assert result.message == "✅ Successfully wrote to file 'a.txt'"
        assert resource.files["./a.txt"] == b"data"

    def test_empty_content_is_allowed(self):
        executor, resource = _make_executor()
        [result] = executor.execute([Command(operation="write-file", path="a.txt", content="")], RW)
        assert result.success is True
        assert resource.files["./a.txt"] == b""

    def test_missing_content(self):
        executor, resource = _make_executor()
        [result] = executor.execute([Command(operation="write-file", path="a.txt")], RW)
        assert result.error_type == "MissingField"
        assert resource.calls == []


class TestEditFile:
    def test_replaces_every_occurrence(self):
        executor, resource = _make_executor({"./n.txt": "foo and foo"})
        cmd = Command(operation="edit-file", path="n.txt", old_text="foo", new_text="bar")
        [result] = executor.execute([cmd], RW)
        assert result.success is True
        assert "(2 replacement(s))" in result.message
        assert resource.files["./n.txt"] == b"bar and bar"

    def test_text_not_found_never_writes(self):
        executor, resource = _make_executor({"./n.txt": "hello"})
        cmd = Command(operation="edit-file", path="n.txt", old_text="absent", new_text="x")
        [result] = executor.execute([cmd], RW)
        assert result.error_type == "StringNotFound"
        assert "not found" in result.message
        assert "write_file" not in resource.ops()

    def test_second_identical_edit_reports_not_found(self):
        executor, resource = _make_executor({"./n.txt": "old"})
        cmd = Command(operation="edit-file", path="n.txt", old_text="old", new_text="new")
        first, second = executor.execute([cmd, cmd], RW)
        assert first.success is True
        assert second.error_type == "StringNotFound"
        assert resource.files["./n.txt"] == b"new"

    @pytest.mark.parametrize("old_text, new_text", [(None, "x"), ("x", None), ("", "x")])
    def test_missing_fields(self, old_text, new_text):
        executor, resource = _make_executor({"./n.txt": "x"})
        cmd = Command(operation="edit-file", path="n.txt", old_text=old_text, new_text=new_text)
        [result] = executor.execute([cmd], RW)
        assert result.error_type == "MissingField"
        assert resource.calls == []


class TestListFiles:
    def test_empty_directory(self):
        executor, _ = _make_executor()
        [result] = executor.execute([Command(operation="list-files", path=".")], RO)
        assert result.success is True
        assert result.message == "📁 Contents of '.':\n  (empty directory)"

    def test_entries(self):
        resource = FakeFileResource({"./a.txt": "", "./b.txt": ""}, dirs={"./."})
        executor = OperationExecutor(resource)
        [result] = executor.execute([Command(operation="list-files", path=".")], RO)
        assert result.message == "📁 Contents of '.':\n  - a.txt\n  - b.txt"


class TestCreateAndDelete:
    def test_create_dir(self):
        executor, resource = _make_executor()
        [result] = executor.execute([Command(operation="create-dir", path="sub")], RW)
        assert result.message == "✅ Created directory 'sub'"
        assert "./sub" in resource.dirs

    def test_delete_file(self):
        executor, resource = _make_executor({"./a.txt": "x"})
        [result] = executor.execute([Command(operation="delete-file", path="a.txt")], RW)
        assert result.message == "✅ Deleted file 'a.txt'"
        assert resource.files == {}

    def test_delete_missing_file(self):
        executor, _ = _make_executor()
        [result] = executor.execute([Command(operation="delete-file", path="a.txt")], RW)
        assert result.error_type == "ResourceError"


class TestUnexpectedFailure:
    def test_unhandled_exception_becomes_result(self):
        resource = MagicMock()
        resource.read_file.side_effect = RuntimeError("boom")
        executor = OperationExecutor(resource)
        [result] = executor.execute([Command(operation="read-file", path="a")], RO)
        assert result.success is False
        assert result.error_type == "ExecutionError"
        assert "boom" in result.message
