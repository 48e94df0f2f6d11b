from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter

from server.dependencies import Services
from server.routes.api import create_api_router
from server.routes.auth import create_auth_router
from server.routes.geo import create_geo_router
from server.routes.pages import create_pages_router
from server.routes.websocket_route import create_websocket_router


def create_router(services: Services) -> APIRouter:
    router = APIRouter()

    router.include_router(create_pages_router(services))
    router.include_router(create_auth_router(services))
    router.include_router(create_api_router(services))
    router.include_router(create_geo_router(services))
    router.include_router(create_websocket_router(services))

    return router
