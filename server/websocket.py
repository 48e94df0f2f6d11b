from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.


import asyncio
import json
import logging
import time
from contextlib import suppress
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger("geochat.websocket")

# ── Heartbeat Constants ─────────────────────────────────
_HEARTBEAT_INTERVAL = 30  # seconds between pings
_HEARTBEAT_TIMEOUT = 60   # seconds before considering client dead (2 missed pongs)


class WebSocketManager:
    """Fans events out to every connected viewer.

    Delivery is fire-and-forget: nothing is queued for clients that are
    not connected, and a socket that fails a send is dropped.
    """

    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []
        self._heartbeat_task: asyncio.Task | None = None
        self._last_pong: dict[int, float] = {}

    # ── Connection Management ───────────────────────────────

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a new WebSocket connection and register it."""
        await websocket.accept()
        self.active_connections.append(websocket)
        self._last_pong[id(websocket)] = time.time()
        logger.info("WebSocket connected. Total: %d", len(self.active_connections))

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a WebSocket connection and clean up tracking state."""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        self._last_pong.pop(id(websocket), None)
        logger.info(
            "WebSocket disconnected. Total: %d", len(self.active_connections)
        )

    # ── Client Message Handling ─────────────────────────────

    async def handle_client_message(self, websocket: WebSocket, data: str) -> None:
        """Process an incoming message from a WebSocket client.

        Only the application-level ``pong`` is understood; anything else,
        JSON or not, is ignored.
        """
        try:
            msg = json.loads(data)
        except (json.JSONDecodeError, ValueError):
            return
        if isinstance(msg, dict) and msg.get("type") == "pong":
            self._last_pong[id(websocket)] = time.time()

    # ── Heartbeat ───────────────────────────────────────────

    async def start_heartbeat(self) -> None:
        """Start the application-level heartbeat loop."""
        self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())
        logger.info("WebSocket heartbeat started (interval=%ds, timeout=%ds)",
                    _HEARTBEAT_INTERVAL, _HEARTBEAT_TIMEOUT)

    async def stop_heartbeat(self) -> None:
        """Stop the heartbeat loop if running."""
        if self._heartbeat_task is not None:
            self._heartbeat_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._heartbeat_task
            self._heartbeat_task = None
            logger.info("WebSocket heartbeat stopped")

    async def _heartbeat_loop(self) -> None:
        while True:
            await asyncio.sleep(_HEARTBEAT_INTERVAL)
            await self.ping_all()

    async def ping_all(self) -> None:
        """Ping every client once and drop the stale or broken ones."""
        if not self.active_connections:
            return

        now = time.time()
        ping_message = json.dumps({"type": "ping", "ts": now})

        stale: list[WebSocket] = []
        for conn in list(self.active_connections):
            last_pong = self._last_pong.get(id(conn), now)
            if now - last_pong > _HEARTBEAT_TIMEOUT:
                logger.warning(
                    "WebSocket client stale (no pong for %.0fs), disconnecting",
                    now - last_pong,
                )
                stale.append(conn)
                continue

            try:
                await conn.send_text(ping_message)
            except Exception:
                logger.warning("Failed to send ping, removing broken connection")
                stale.append(conn)

        for conn in stale:
            self.disconnect(conn)

    # ── Broadcast ───────────────────────────────────────────

    async def emit(self, event_type: str, data: dict[str, Any]) -> None:
        """Broadcast a typed event: ``{"type": event_type, "data": data}``."""
        await self.broadcast({"type": event_type, "data": data})

    async def broadcast(self, data: dict) -> None:
        """Broadcast a message to all active WebSocket connections."""
        if not self.active_connections:
            return
        message = json.dumps(data, ensure_ascii=False, default=str)
        disconnected: list[WebSocket] = []
        for conn in list(self.active_connections):
            try:
                await conn.send_text(message)
            except Exception:
                logger.warning("broadcast_failed", exc_info=True)
                disconnected.append(conn)
        for conn in disconnected:
            self.disconnect(conn)
