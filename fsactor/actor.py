from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Byte-level facade of the filesystem actor.

The host hands the actor opaque bytes: an init payload once, then a
message and the previously returned state on every request.  This module
decodes them, delegates to :class:`SessionDispatcher` and encodes the
reply and the next state.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from fsactor.chain.loader import ChainLoader
from fsactor.chain.transport import HttpStoreTransport, RetryingStoreTransport, StoreTransport
from fsactor.config.models import FsActorConfig
from fsactor.dispatcher import SessionDispatcher
from fsactor.exceptions import ProtocolError
from fsactor.schemas import Envelope, Reply, Session
from fsactor.tooling.executor import OperationExecutor
from fsactor.tooling.resource import FileResource, LocalFileResource

logger = logging.getLogger("fsactor.actor")


def build_transport(config: FsActorConfig) -> StoreTransport:
    """Create the store transport described by ``config.store``."""
    store = config.store
    transport: StoreTransport = HttpStoreTransport(
        store.base_url,
        request_path=store.request_path,
        timeout=store.timeout,
    )
    if store.max_retries > 0:
        transport = RetryingStoreTransport(
            transport,
            max_retries=store.max_retries,
            base_delay=store.retry_base_delay,
            max_delay=store.retry_max_delay,
        )
    return transport


def build_dispatcher(
    config: FsActorConfig,
    *,
    resource: FileResource | None = None,
    transport: StoreTransport | None = None,
) -> SessionDispatcher:
    """Wire a dispatcher from *config*; *resource*/*transport* override the defaults."""
    if resource is None:
        root = Path(config.executor.sandbox_root) if config.executor.sandbox_root else Path.cwd()
        resource = LocalFileResource(root)
    if transport is None:
        transport = build_transport(config)
    executor = OperationExecutor(
        resource,
        allow_parent_segments=config.executor.allow_parent_segments,
    )
    return SessionDispatcher(
        ChainLoader(transport),
        executor,
        render_html=config.render_html,
    )


class FsCommandActor:
    """Host-facing actor: ``init`` / ``handle_request`` / ``handle_send``."""

    def __init__(self, dispatcher: SessionDispatcher, config: FsActorConfig | None = None) -> None:
        self._dispatcher = dispatcher
        self._config = config or FsActorConfig()

    @classmethod
    def from_config(
        cls,
        config: FsActorConfig,
        *,
        resource: FileResource | None = None,
        transport: StoreTransport | None = None,
    ) -> FsCommandActor:
        return cls(build_dispatcher(config, resource=resource, transport=transport), config)

    def init(self, data: bytes | None = None) -> bytes:
        """Return the initial state.

        *data* may carry a JSON object overriding session fields
        (``base_path``, ``permissions``, ``instance_name``).

        Raises:
            ProtocolError: *data* is not a JSON object of session fields.
        """
        session = self._config.session.new_session()
        if data:
            try:
                overrides = json.loads(data)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ProtocolError(f"Invalid init payload: {e}") from e
            if not isinstance(overrides, dict):
                raise ProtocolError("Init payload must be a JSON object")
            try:
                session = Session.model_validate({**session.model_dump(), **overrides})
            except ValidationError as e:
                raise ProtocolError(f"Invalid init payload: {e.error_count()} validation error(s)") from e
        logger.info(
            "Actor initialised base_path=%s permissions=%s",
            session.base_path, ",".join(session.permissions),
        )
        return session.to_bytes()

    def handle_request(self, msg: bytes, state: bytes) -> tuple[bytes, bytes]:
        """Dispatch *msg* against *state*; returns ``(reply, next_state)``."""
        try:
            session = Session.from_bytes(state)
        except ValidationError as e:
            logger.error("Undecodable actor state: %s", e)
            return Reply(text="❌ Invalid actor state").to_bytes(), state

        try:
            envelope = Envelope.model_validate_json(msg)
        except ValidationError as e:
            logger.warning("Undecodable message: %s", e)
            reply = Reply(child_id=session.child_id or "", text="❌ Invalid message envelope")
            return reply.to_bytes(), state

        reply, next_session = self._dispatcher.handle_request(envelope, session)
        if next_session == session:
            return reply.to_bytes(), state
        return reply.to_bytes(), next_session.to_bytes()

    def handle_send(self, msg: bytes, state: bytes) -> bytes:
        return state
