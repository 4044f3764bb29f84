from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter

from server.routes.actors import create_actors_router
from server.routes.system import create_system_router


def create_router() -> APIRouter:
    router = APIRouter()
    api = APIRouter(prefix="/api")

    api.include_router(create_actors_router())
    api.include_router(create_system_router())

    router.include_router(api)

    return router
