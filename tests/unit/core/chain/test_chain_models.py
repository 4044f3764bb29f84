"""Unit tests for chain entry decoding across payload wire shapes."""
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fsactor.chain.models import (
    ChainEntry,
    ChildRollup,
    SimpleChatMessage,
    StructuredChatMessage,
    UserTurn,
)


class TestChatPayloads:
    def test_simple_user_message(self):
        entry = ChainEntry.model_validate({"parent": "p1", "data": {"role": "user", "content": "hi"}})
        assert isinstance(entry.data, SimpleChatMessage)
        assert entry.chat_message.is_user
        assert entry.chat_message.content_text() == "hi"
        assert entry.parent == "p1"

    def test_simple_assistant_message(self):
        entry = ChainEntry.model_validate({"data": {"role": "assistant", "content": "hello"}})
        assert entry.chat_message.is_user is False

    def test_structured_user_message(self):
        entry = ChainEntry.model_validate({"data": {"User": {"content": "do it"}}})
        assert isinstance(entry.data, StructuredChatMessage)
        assert isinstance(entry.data.turn, UserTurn)
        assert entry.chat_message.content_text() == "do it"

    def test_structured_assistant_with_content_blocks(self):
        entry = ChainEntry.model_validate({"data": {"Assistant": {
            "id": "msg_1",
            "model": "m",
            "content": [{"type": "text", "text": "a"}, {"type": "tool_use"}, {"type": "text", "text": "b"}],
            "stop_reason": "end_turn",
            "usage": {"input_tokens": 1, "output_tokens": 2},
        }}})
        assert entry.chat_message.is_user is False
        assert entry.chat_message.content_text() == "ab"

    def test_structured_assistant_with_null_content(self):
        entry = ChainEntry.model_validate({"data": {"Assistant": {"content": None, "stop_reason": "tool_use"}}})
        assert entry.chat_message.is_user is False
        assert entry.chat_message.content_text() == ""

    def test_chat_wrapper(self):
        entry = ChainEntry.model_validate({"data": {"Chat": {"User": {"content": "wrapped"}}}})
        assert entry.chat_message.content_text() == "wrapped"

    def test_from_json(self):
        entry = ChainEntry.model_validate_json('{"parent": null, "data": {"role": "user", "content": "x"}}')
        assert entry.parent is None


class TestRollupPayloads:
    def test_bare_list(self):
        entry = ChainEntry.model_validate({"data": [{"child_id": "c1", "text": "done"}]})
        assert entry.is_rollup
        assert entry.chat_message is None
        assert entry.data.responses[0].child_id == "c1"

    def test_wrapped_rollup_keeps_extra_fields(self):
        entry = ChainEntry.model_validate({"data": {"ChildRollup": [
            {"child_id": "c1", "text": "t", "html": "<b>t</b>"},
        ]}})
        assert isinstance(entry.data, ChildRollup)
        assert entry.data.responses[0].model_extra == {"html": "<b>t</b>"}

    def test_empty_rollup(self):
        assert ChainEntry.model_validate({"data": []}).is_rollup


class TestInvalidPayloads:
    @pytest.mark.parametrize("data", [
        {"something": "else"},
        {"User": {"no_content": True}},
        "plain string",
        {"role": "user"},
    ])
    def test_rejected(self, data):
        with pytest.raises(ValidationError):
            ChainEntry.model_validate({"data": data})
