from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Chain entries as stored by the external chain store.

Entries are only ever decoded here, never built for the store.  The
``data`` payload comes in several wire shapes depending on the store's
protocol revision; :meth:`ChainEntry._normalize_payload` tags them so a
discriminated union can validate them:

* ``{"role": "user", "content": "..."}``  → :class:`SimpleChatMessage`
* ``{"User": {"content": "..."}}`` / ``{"Assistant": {...}}``
  → :class:`StructuredChatMessage`
* ``[{"child_id": ..., "text": ...}, ...]`` → :class:`ChildRollup`
* the same wrapped as ``{"Chat": ...}`` / ``{"ChildRollup": [...]}``
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ── Chat messages ─────────────────────────────────────────


class SimpleChatMessage(BaseModel):
    """Older ``{role, content}`` record."""

    kind: Literal["simple"] = "simple"
    role: str
    content: str

    @property
    def is_user(self) -> bool:
        return self.role == "user"

    def content_text(self) -> str:
        return self.content


class UserTurn(BaseModel):
    role: Literal["user"] = "user"
    content: str

    def content_text(self) -> str:
        return self.content


class AssistantTurn(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str | list[Any] | None = ""
    id: str | None = None
    model: str | None = None
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: dict[str, Any] | None = None

    def content_text(self) -> str:
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        # Content blocks: keep the text ones
        return "".join(
            block.get("text", "") for block in self.content
            if isinstance(block, dict) and block.get("type", "text") == "text"
        )


class StructuredChatMessage(BaseModel):
    """Newer ``{User{...} | Assistant{...}}`` record."""

    kind: Literal["structured"] = "structured"
    turn: Annotated[UserTurn | AssistantTurn, Field(discriminator="role")]

    @property
    def is_user(self) -> bool:
        return isinstance(self.turn, UserTurn)

    def content_text(self) -> str:
        return self.turn.content_text()


ChatMessage = SimpleChatMessage | StructuredChatMessage


# ── Rollups ───────────────────────────────────────────────


class ChildMessage(BaseModel):
    """One downstream response collected into a rollup."""

    model_config = ConfigDict(extra="allow")

    child_id: str
    text: str = ""
    data: Any = None


class ChildRollup(BaseModel):
    kind: Literal["rollup"] = "rollup"
    responses: list[ChildMessage] = Field(default_factory=list)


ChainPayload = Annotated[
    SimpleChatMessage | StructuredChatMessage | ChildRollup,
    Field(discriminator="kind"),
]


# ── Entry ─────────────────────────────────────────────────


def _tag_chat(raw: Any) -> Any:
    if not isinstance(raw, dict) or "kind" in raw:
        return raw
    if len(raw) == 1:
        key, body = next(iter(raw.items()))
        if key in ("User", "Assistant") and isinstance(body, dict):
            return {"kind": "structured", "turn": {**body, "role": key.lower()}}
    if "role" in raw:
        return {**raw, "kind": "simple"}
    return raw


def _tag_payload(raw: Any) -> Any:
    if isinstance(raw, list):
        return {"kind": "rollup", "responses": raw}
    if isinstance(raw, dict) and len(raw) == 1:
        key, body = next(iter(raw.items()))
        if key == "Chat":
            return _tag_chat(body)
        if key == "ChildRollup" and isinstance(body, list):
            return {"kind": "rollup", "responses": body}
    return _tag_chat(raw)


class ChainEntry(BaseModel):
    parent: str | None = None
    id: str | None = None
    data: ChainPayload

    @model_validator(mode="before")
    @classmethod
    def _normalize_payload(cls, values: Any) -> Any:
        if isinstance(values, dict) and "data" in values:
            return {**values, "data": _tag_payload(values["data"])}
        return values

    @property
    def is_rollup(self) -> bool:
        return isinstance(self.data, ChildRollup)

    @property
    def chat_message(self) -> ChatMessage | None:
        if isinstance(self.data, ChildRollup):
            return None
        return self.data
