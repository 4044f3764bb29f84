from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from fsactor.exceptions import SessionCorruptedError, SessionError, SessionNotFoundError
from fsactor.schemas import KNOWN_CAPABILITIES, Session
from fsactor.session_store import SessionStore, validate_session_name

logger = logging.getLogger("fsactor.routes.actors")


class CreateSessionRequest(BaseModel):
    base_path: str | None = None
    permissions: list[str] | None = None
    instance_name: str | None = None


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def _session_lock(request: Request, name: str) -> asyncio.Lock:
    locks: dict[str, asyncio.Lock] = request.app.state.session_locks
    lock = locks.get(name)
    if lock is None:
        lock = locks[name] = asyncio.Lock()
    return lock


def create_actors_router() -> APIRouter:
    router = APIRouter()

    @router.post("/actors/{name}")
    async def create_session(name: str, request: Request, body: CreateSessionRequest | None = None):
        """Create a session from the configured defaults plus *body* overrides."""
        try:
            validate_session_name(name)
        except SessionError as e:
            return _error(400, str(e))

        body = body or CreateSessionRequest()
        if body.permissions is not None:
            unknown = sorted(set(body.permissions) - KNOWN_CAPABILITIES)
            if unknown:
                return _error(400, f"Unknown capabilities: {', '.join(unknown)}")

        store: SessionStore = request.app.state.session_store
        session = request.app.state.config.session.new_session()
        overrides = body.model_dump(exclude_none=True)
        if overrides:
            try:
                session = Session.model_validate({**session.model_dump(), **overrides})
            except ValidationError as e:
                return _error(400, f"Invalid session fields: {e.errors()[0]['msg']}")

        async with _session_lock(request, name):
            if store.exists(name):
                return _error(409, f"Session already exists: {name}")
            await asyncio.to_thread(store.save, name, session)

        logger.info("Session created via API name=%s", name)
        return JSONResponse(status_code=201, content=session.model_dump(mode="json"))

    @router.get("/actors/{name}")
    async def get_session(name: str, request: Request):
        store: SessionStore = request.app.state.session_store
        try:
            session = await asyncio.to_thread(store.load, name)
        except SessionNotFoundError as e:
            return _error(404, str(e))
        except SessionCorruptedError as e:
            return _error(500, str(e))
        except SessionError as e:
            return _error(400, str(e))
        return session.model_dump(mode="json")

    @router.post("/actors/{name}/requests")
    async def handle_request(name: str, envelope: dict[str, Any], request: Request):
        """Dispatch *envelope* against the persisted session and return the reply."""
        store: SessionStore = request.app.state.session_store
        dispatcher = request.app.state.dispatcher
        try:
            validate_session_name(name)
        except SessionError as e:
            return _error(400, str(e))

        async with _session_lock(request, name):
            try:
                session = await asyncio.to_thread(store.load, name)
            except SessionNotFoundError as e:
                return _error(404, str(e))
            except SessionCorruptedError as e:
                return _error(500, str(e))

            reply, next_session = await asyncio.to_thread(dispatcher.handle_request, envelope, session)
            if next_session != session:
                await asyncio.to_thread(store.save, name, next_session)

        return reply.model_dump(mode="json", exclude_none=True)

    return router
