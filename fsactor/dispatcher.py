from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Per-request state machine of the filesystem actor.

``SessionDispatcher.handle_request`` takes an inbound envelope plus the
persisted :class:`Session` and returns a :class:`Reply` together with the
(possibly updated) session:

* ``introduction`` binds identity and store handle, replies with the
  capability guide.
* ``head-update`` loads the head entry, extracts commands from user chat
  messages, executes them and replies with the transcript.  Rollups are
  never reprocessed.
* anything else gets a diagnostic reply.

No failure escapes; the session is only changed by a first introduction.
"""

import logging
from typing import Any

import structlog
from pydantic import ValidationError

from fsactor.chain.loader import ChainLoader
from fsactor.exceptions import StoreError
from fsactor.schemas import Envelope, Reply, Session
from fsactor.tooling.executor import OperationExecutor
from fsactor.tooling.extractor import extract
from fsactor.tooling.guide import build_capability_guide, render_guide_html

logger = logging.getLogger("fsactor.dispatcher")

MSG_INTRODUCTION = "introduction"
MSG_HEAD_UPDATE = "head-update"

TRANSCRIPT_SEPARATOR = "\n\n"


class SessionDispatcher:
    """Route inbound envelopes for one actor.

    Args:
        loader: Chain loader used on ``head-update``.
        executor: Executor for extracted commands.
        render_html: Attach an HTML rendering of the capability guide to
            introduction replies.
    """

    def __init__(
        self,
        loader: ChainLoader,
        executor: OperationExecutor,
        *,
        render_html: bool = True,
    ) -> None:
        self._loader = loader
        self._executor = executor
        self._render_html = render_html

    def handle_request(
        self,
        message: Envelope | dict[str, Any],
        session: Session,
    ) -> tuple[Reply, Session]:
        try:
            envelope = message if isinstance(message, Envelope) else Envelope.model_validate(message)
        except ValidationError as e:
            logger.warning("Invalid envelope: %s", e)
            return self._diagnostic(session, "❌ Invalid message envelope"), session

        msg_type = envelope.msg_type
        with structlog.contextvars.bound_contextvars(msg_type=msg_type or "-"):
            try:
                if msg_type is None:
                    logger.warning("No message type provided")
                    return self._diagnostic(session, "❌ No message type provided"), session
                if msg_type == MSG_INTRODUCTION:
                    return self._handle_introduction(envelope.data, session)
                if msg_type == MSG_HEAD_UPDATE:
                    return self._handle_head_update(envelope.data, session), session
                logger.warning("Unknown message type: %s", msg_type)
                return self._diagnostic(session, f"❓ Unknown message type: {msg_type}"), session
            except Exception as e:
                logger.exception("Request handling failed msg_type=%s", msg_type)
                return self._diagnostic(session, f"❌ Request failed: {e}"), session

    def handle_send(self, message: Envelope | dict[str, Any], session: Session) -> Session:
        """One-way sends carry nothing for this actor; the session is returned as is."""
        return session

    # ── Transitions ───────────────────────────────────────

    def _handle_introduction(self, data: dict[str, Any], session: Session) -> tuple[Reply, Session]:
        child_id = data.get("child_id")
        store_id = data.get("store_id")
        if not isinstance(child_id, str) or not isinstance(store_id, str):
            logger.warning("Failed to get child_id or store_id from introduction")
            return (
                self._diagnostic(session, "❌ Failed to get child_id or store_id from introduction"),
                session,
            )

        if session.child_id is not None:
            logger.info(
                "Session already bound to child_id=%s; ignoring child_id=%s",
                session.child_id, child_id,
            )
            bound = session
        else:
            bound = session.model_copy(update={"child_id": child_id, "store_id": store_id})
            logger.info("Received child_id: %s and store_id: %s", child_id, store_id)

        text = build_capability_guide(bound.instance_name)
        reply = Reply(
            child_id=bound.child_id or "",
            text=text,
            html=render_guide_html(text) if self._render_html else None,
        )
        return reply, bound

    def _handle_head_update(self, data: dict[str, Any], session: Session) -> Reply:
        head = data.get("head")
        if session.child_id is None or not isinstance(head, str):
            logger.debug("head-update without bound identity or head; acknowledging")
            return self._acknowledge(session)

        with structlog.contextvars.bound_contextvars(head=head):
            logger.info("Processing head update: %s", head)
            try:
                entry = self._loader.load_entry(head, session)
            except StoreError as e:
                logger.error("Error loading message: %s", e)
                return Reply(
                    child_id=session.child_id,
                    text=f"❌ Failed to load message: {e}",
                    parent_id=head,
                    data={"head": head},
                )

            chat = entry.chat_message
            if chat is None:
                logger.debug("Skipping child rollup entry")
                return self._acknowledge(session)
            if not chat.is_user:
                logger.debug("Skipping non-user chat message")
                return self._acknowledge(session)

            commands = extract(chat.content_text(), session.instance_name)
            if not commands:
                return self._acknowledge(session)

            logger.info("Found %d commands", len(commands))
            results = self._executor.execute(commands, session)
            failed = sum(1 for r in results if not r.success)
            if failed:
                logger.info("%d of %d commands failed", failed, len(results))
            return Reply(
                child_id=session.child_id,
                text=TRANSCRIPT_SEPARATOR.join(r.message for r in results),
                parent_id=head,
                data={"head": head},
            )

    # ── Replies ───────────────────────────────────────────

    @staticmethod
    def _diagnostic(session: Session, text: str) -> Reply:
        return Reply(child_id=session.child_id or "", text=text)

    @staticmethod
    def _acknowledge(session: Session) -> Reply:
        return Reply(child_id=session.child_id or "", text="")
