from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter, Request

from fsactor import __version__


def create_system_router() -> APIRouter:
    router = APIRouter()

    @router.get("/system/health")
    async def health_check():
        """Simple health check endpoint."""
        return {"status": "ok"}

    @router.get("/system/info")
    async def system_info(request: Request):
        config = request.app.state.config
        return {
            "version": __version__,
            "store_url": config.store.base_url,
            "allow_parent_segments": config.executor.allow_parent_segments,
            "sessions": request.app.state.session_store.list_names(),
        }

    return router
