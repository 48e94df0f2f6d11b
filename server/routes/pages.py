from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from server.context import RequestContext, get_context
from server.dependencies import Services


def create_pages_router(services: Services) -> APIRouter:
    router = APIRouter(tags=["pages"])
    page_size = services.config.messages.page_size

    @router.get("/", response_class=HTMLResponse)
    async def index(ctx: RequestContext = Depends(get_context)):
        """Latest page of messages, oldest first."""
        messages = services.messages.list_recent(page=0, page_size=page_size)
        messages.reverse()
        return HTMLResponse(services.views.render_index(messages, viewer=ctx.user))

    return router
