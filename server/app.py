from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.


import logging
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse as StarletteJSONResponse
from starlette.responses import Response

from core.auth.manager import ensure_guest_account
from core.auth.sessions import SessionStore
from core.auth.store import UserStore
from core.config.models import ChatConfig, load_config
from core.database import Database
from core.exceptions import UpstreamFailure
from core.geo import GeoLocator
from core.messages import MessageStore
from server.context import SessionMiddleware
from server.dependencies import Services
from server.routes import create_router
from server.views import ViewRenderer
from server.websocket import WebSocketManager

logger = logging.getLogger("geochat.server")

STATIC_DIR = Path(__file__).parent / "static"

# Paths to exclude from request logging
_NOISY_PATHS = frozenset({
    "/ws",
})

_CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Methods": "GET,POST,PUT,HEAD,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "Origin, Content-Type, Accept, X-Requested-With",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status, and duration.

    Automatically binds a ``request_id`` into structlog contextvars so that
    all log records emitted during request processing carry the ID.
    """

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        structlog.contextvars.clear_contextvars()
        request_id = request.headers.get(
            "X-Request-ID", uuid.uuid4().hex[:12],
        )
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        response.headers["X-Request-ID"] = request_id

        if request.url.path not in _NOISY_PATHS:
            req_logger = logging.getLogger("geochat.request")
            req_logger.info(
                "request %s %s -> %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )

        return response


def _apply_cors(request: Request, response: Response) -> Response:
    # Echo the caller's origin so remote test clients can send credentials.
    response.headers["Access-Control-Allow-Origin"] = request.headers.get("origin") or "*"
    for name, value in _CORS_HEADERS.items():
        response.headers[name] = value
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    services: Services = app.state.services
    await services.ws_manager.start_heartbeat()
    logger.info("Server started at %s", services.config.server.public_uri)
    yield
    await services.ws_manager.stop_heartbeat()
    logger.info("Server stopped")


def build_services(config: ChatConfig) -> Services:
    """Open the database and construct every collaborator for *config*."""
    db = Database(config.database_path())
    users = UserStore(db)
    ensure_guest_account(users, config.guest_account)
    return Services(
        config=config,
        users=users,
        sessions=SessionStore(db),
        messages=MessageStore(db, max_text_length=config.messages.max_text_length),
        views=ViewRenderer(),
        geo=GeoLocator(config.geo),
        ws_manager=WebSocketManager(),
    )


def create_app(config: ChatConfig | None = None, *, services: Services | None = None) -> FastAPI:
    if services is None:
        if config is None:
            config = load_config()
        services = build_services(config)
    config = services.config

    docs = config.environment != "production"
    app = FastAPI(
        title="GeoChat",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs else None,
    )
    app.state.services = services

    # ── Exception handlers ──────────────────────────────────
    @app.exception_handler(UpstreamFailure)
    async def upstream_failure_handler(request: Request, exc: UpstreamFailure):
        return StarletteJSONResponse(exc.to_dict(), status_code=exc.status)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        # Runs outside the http middlewares, so CORS is applied here too.
        return _apply_cors(
            request,
            StarletteJSONResponse({"error": "Internal server error"}, status_code=500),
        )

    # ── Middleware (last added runs first) ─────────────────
    app.add_middleware(
        SessionMiddleware,
        sessions=services.sessions,
        users=services.users,
        config=config,
    )

    @app.middleware("http")
    async def cors_headers(request: Request, call_next):  # type: ignore[no-untyped-def]
        if request.method == "OPTIONS":
            return _apply_cors(request, Response(status_code=204))
        response = await call_next(request)
        return _apply_cors(request, response)

    app.add_middleware(RequestLoggingMiddleware)

    # ── Route registration ─────────────────────────────────
    app.include_router(create_router(services))

    # ── Static files ───────────────────────────────────────
    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app
