"""Unit tests for file-backed session persistence."""
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest

from fsactor.exceptions import SessionCorruptedError, SessionError, SessionNotFoundError
from fsactor.schemas import Session
from fsactor.session_store import SessionStore, atomic_write_bytes, validate_session_name


@pytest.fixture
def store(data_dir):
    return SessionStore(data_dir / "sessions")


class TestValidateSessionName:
    @pytest.mark.parametrize("name", ["a", "actor-1", "my_actor", "a" * 31])
    def test_valid(self, name):
        validate_session_name(name)

    @pytest.mark.parametrize("name", ["", "1abc", "Upper", "../evil", "a/b", "a" * 32, "dot.json"])
    def test_invalid(self, name):
        with pytest.raises(SessionError):
            validate_session_name(name)


class TestSessionStore:
    def test_save_and_load(self, store):
        session = Session(child_id="c1", store_id="s1", permissions=["read"], instance_name="alpha")
        store.save("main", session)
        assert store.load("main") == session

    def test_load_missing(self, store):
        with pytest.raises(SessionNotFoundError):
            store.load("missing")

    def test_load_corrupted(self, store):
        store.path_for("broken").write_text("{not json", encoding="utf-8")
        with pytest.raises(SessionCorruptedError):
            store.load("broken")

    def test_create_refuses_existing(self, store):
        store.create("main", Session())
        with pytest.raises(SessionError, match="already exists"):
            store.create("main", Session())

    def test_exists_and_list(self, store):
        assert store.list_names() == []
        store.save("beta", Session())
        store.save("alpha", Session())
        assert store.exists("alpha")
        assert store.list_names() == ["alpha", "beta"]

    def test_no_temp_files_left(self, store):
        store.save("main", Session())
        assert [p.name for p in store.directory.iterdir()] == ["main.json"]

    def test_invalid_name_never_touches_disk(self, store):
        with pytest.raises(SessionError):
            store.save("../escape", Session())
        assert list(store.directory.iterdir()) == []


class TestAtomicWriteBytes:
    def test_creates_parent_and_replaces(self, tmp_path):
        target = tmp_path / "nested" / "file.json"
        atomic_write_bytes(target, b"one")
        atomic_write_bytes(target, b"two")
        assert target.read_bytes() == b"two"
