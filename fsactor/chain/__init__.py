# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from fsactor.chain.loader import ChainLoader, build_get_request, extract_payload
from fsactor.chain.models import (
    AssistantTurn,
    ChainEntry,
    ChatMessage,
    ChildMessage,
    ChildRollup,
    SimpleChatMessage,
    StructuredChatMessage,
    UserTurn,
)
from fsactor.chain.transport import HttpStoreTransport, RetryingStoreTransport, StoreTransport

__all__ = [
    "AssistantTurn",
    "ChainEntry",
    "ChainLoader",
    "ChatMessage",
    "ChildMessage",
    "ChildRollup",
    "HttpStoreTransport",
    "RetryingStoreTransport",
    "SimpleChatMessage",
    "StoreTransport",
    "StructuredChatMessage",
    "UserTurn",
    "build_get_request",
    "extract_payload",
]
