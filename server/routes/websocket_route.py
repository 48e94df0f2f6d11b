from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from server.dependencies import Services

logger = logging.getLogger("geochat.routes.websocket")


def create_websocket_router(services: Services) -> APIRouter:
    """Realtime channel; open to anonymous viewers, receive-only apart from pongs."""
    router = APIRouter()
    ws_manager = services.ws_manager

    @router.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await ws_manager.connect(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                await ws_manager.handle_client_message(websocket, data)
        except WebSocketDisconnect:
            logger.info("WebSocket client disconnected normally")
        except Exception:
            logger.warning("WebSocket connection lost unexpectedly", exc_info=True)
        finally:
            ws_manager.disconnect(websocket)

    return router
