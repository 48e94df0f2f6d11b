from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

"""JSON API: current principal and message creation."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask

from core.exceptions import ValidationOrPersistenceFailure
from core.messages import Creator, Message
from server.context import RequestContext, get_context, require_user, run_gates
from server.dependencies import Services
from server.payload import read_payload

logger = logging.getLogger("geochat.routes.api")

CHAT_MESSAGE_EVENT = "chat.message"

_MESSAGE_GATES = (require_user,)


async def broadcast_message(services: Services, message: Message) -> None:
    """Push a viewer-neutral fragment of *message* to every socket.

    Runs after the HTTP response is sent; a failure here is logged and
    never touches the stored message or the author's response.
    """
    try:
        view = services.views.render_message(message)
        await services.ws_manager.emit(
            CHAT_MESSAGE_EVENT,
            {"model": message.model_dump(mode="json"), "view": view},
        )
    except Exception:
        logger.exception("Broadcast of message %s failed", message.id)


def create_api_router(services: Services) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["api"])

    @router.get("/me")
    async def me(ctx: RequestContext = Depends(get_context)):
        if ctx.user is None:
            return {"name": "guest"}
        return ctx.user.to_client()

    @router.post("/message")
    async def create_message(request: Request, ctx: RequestContext = Depends(get_context)):
        denied = run_gates(ctx, _MESSAGE_GATES)
        if denied is not None:
            return denied

        body = await read_payload(request)
        try:
            message = services.messages.create(
                Creator.from_user(ctx.user),
                body.get("text"),
                body.get("geo"),
            )
        except ValidationOrPersistenceFailure as exc:
            logger.info("Message rejected for '%s': %s", ctx.user.username, exc)
            return JSONResponse(exc.to_dict(), status_code=400)

        view = services.views.render_message(message, viewer=ctx.user)
        return JSONResponse(
            {"model": message.model_dump(mode="json"), "view": view},
            status_code=201,
            background=BackgroundTask(broadcast_message, services, message),
        )

    return router
