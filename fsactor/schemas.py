from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


import re
from enum import Enum
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

# Session and instance names end up in file paths
SAFE_NAME_RE = re.compile(r"^[a-z][a-z0-9_-]{0,30}$")


def normalize_instance_name(value: str | None) -> str | None:
    """Map ``""`` to ``None`` and reject names unsafe as a path segment."""
    if value is None or value == "":
        return None
    if not SAFE_NAME_RE.match(value):
        raise ValueError(
            f"invalid instance name {value!r} "
            "(must be lowercase alphanumeric, start with a letter, max 31 chars)"
        )
    return value


InstanceName = Annotated[str | None, AfterValidator(normalize_instance_name)]


# ── Operations ────────────────────────────────────────────


class OperationKind(str, Enum):
    """Operations understood inside ``<fs-command>`` blocks."""

    READ_FILE = "read-file"
    WRITE_FILE = "write-file"
    EDIT_FILE = "edit-file"
    LIST_FILES = "list-files"
    CREATE_DIR = "create-dir"
    DELETE_FILE = "delete-file"

    @classmethod
    def parse(cls, name: str) -> OperationKind | None:
        """Return the kind for *name*, or ``None`` for unknown operations."""
        try:
            return cls(name)
        except ValueError:
            return None


class Capability(str, Enum):
    """Capability tokens a session's permission set may contain."""

    READ = "read"
    WRITE = "write"


KNOWN_CAPABILITIES: frozenset[str] = frozenset(c.value for c in Capability)


class Command(BaseModel):
    """One decoded ``<fs-command>`` block.

    ``operation`` keeps the raw text from the markup; unknown names are
    carried through so the permission gate can deny them.
    """

    model_config = ConfigDict(frozen=True)

    operation: str
    path: str
    content: str | None = None
    old_text: str | None = None
    new_text: str | None = None

    @property
    def kind(self) -> OperationKind | None:
        return OperationKind.parse(self.operation)


class ExecutionResult(BaseModel):
    """Outcome of one command, in the order the commands were given."""

    model_config = ConfigDict(frozen=True)

    operation: str
    path: str
    message: str
    success: bool
    error_type: str | None = None  # "PermissionDenied", "StringNotFound", ...


# ── Session ───────────────────────────────────────────────


class Session(BaseModel):
    """Persisted per-actor state.

    The host treats the serialized form as opaque and hands it back on
    every request. ``child_id`` is the identity assigned on introduction,
    ``store_id`` the handle of the chain store.
    """

    model_config = ConfigDict(frozen=True)

    child_id: str | None = None
    store_id: str | None = None
    base_path: str = "."
    permissions: list[str] = Field(default_factory=lambda: ["read", "write"])
    instance_name: InstanceName = None

    @property
    def is_bound(self) -> bool:
        return self.child_id is not None and self.store_id is not None

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> Session:
        return cls.model_validate_json(raw)


# ── Host envelopes ────────────────────────────────────────


class Envelope(BaseModel):
    """Inbound host message: ``{"msg_type": ..., "data": {...}}``."""

    msg_type: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("msg_type", mode="before")
    @classmethod
    def _non_string_type_is_missing(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None

    @field_validator("data", mode="before")
    @classmethod
    def _non_object_data_is_empty(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class Reply(BaseModel):
    """Outbound reply handed back to the host."""

    child_id: str = ""
    text: str = ""
    html: str | None = None
    parent_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    def to_bytes(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")
