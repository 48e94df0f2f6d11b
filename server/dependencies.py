from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

"""The collaborators every router factory receives explicitly."""

from dataclasses import dataclass

from core.auth.sessions import SessionStore
from core.auth.store import UserStore
from core.config.models import ChatConfig
from core.geo import GeoLocator
from core.messages import MessageStore
from server.views import ViewRenderer
from server.websocket import WebSocketManager


@dataclass(frozen=True)
class Services:
    config: ChatConfig
    users: UserStore
    sessions: SessionStore
    messages: MessageStore
    views: ViewRenderer
    geo: GeoLocator
    ws_manager: WebSocketManager
