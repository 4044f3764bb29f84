from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse as StarletteJSONResponse

from fsactor import __version__
from fsactor.actor import build_dispatcher, build_transport
from fsactor.chain.transport import StoreTransport
from fsactor.config.models import FsActorConfig
from fsactor.logging_config import set_request_id
from fsactor.session_store import SessionStore
from fsactor.tooling.resource import FileResource
from server.routes import create_router

logger = logging.getLogger("fsactor.server")

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by supervisors; not worth a log line each
_UNLOGGED_PATHS = frozenset({"/api/system/health"})

request_logger = logging.getLogger("fsactor.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each HTTP request with an ID and log its outcome.

    The ID comes from the caller's ``X-Request-ID`` header or is generated,
    is bound into structlog contextvars for everything logged while the
    request runs (dispatcher and store logs included) and is echoed back
    in the response header.
    """

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        structlog.contextvars.clear_contextvars()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        set_request_id(request_id)
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        if request.url.path not in _UNLOGGED_PATHS:
            request_logger.info(
                "request %s %s -> %d (%.1fms)",
                request.method, request.url.path, response.status_code, elapsed_ms,
            )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("FsActor host started; sessions in %s", app.state.session_store.directory)
    yield
    close = getattr(app.state.transport, "close", None)
    if close is not None:
        close()
    logger.info("FsActor host stopped")


def create_app(
    config: FsActorConfig,
    data_dir: Path,
    *,
    resource: FileResource | None = None,
    transport: StoreTransport | None = None,
) -> FastAPI:
    """Build the HTTP host.

    *resource* and *transport* default to what *config* describes; tests
    pass in-memory replacements.
    """
    app = FastAPI(title="FsActor", version=__version__, lifespan=lifespan)

    if transport is None:
        transport = build_transport(config)

    app.state.config = config
    app.state.transport = transport
    app.state.dispatcher = build_dispatcher(config, resource=resource, transport=transport)
    app.state.session_store = SessionStore(data_dir / "sessions")
    app.state.session_locks = {}

    # ── Global exception handler ────────────────────────────
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        return StarletteJSONResponse(
            {"error": "Internal server error"}, status_code=500,
        )

    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(create_router())

    return app
