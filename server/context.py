from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Per-request context, authorization gates and the session middleware.

``SessionMiddleware`` resolves the session cookie into a
:class:`RequestContext` stored on ``request.state.context``.  Handlers
read it through :func:`get_context` and run an ordered tuple of gates
before doing any work; the first gate that returns a response wins.
"""

import dataclasses
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import HTTPConnection, Request

from core.auth.models import Session, User
from core.auth.sessions import SessionStore
from core.auth.store import UserStore
from core.config.models import ChatConfig
from core.exceptions import Forbidden

logger = logging.getLogger("geochat.context")


@dataclass(frozen=True)
class RequestContext:
    session: Session
    user: User | None
    client_ip: str

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


Gate = Callable[[RequestContext], JSONResponse | None]


def require_user(ctx: RequestContext) -> JSONResponse | None:
    """Pass when the session carries a principal, else 403."""
    if not ctx.is_authenticated:
        denied = Forbidden("not authenticated")
        return JSONResponse(denied.to_dict(), status_code=denied.status)
    return None


def run_gates(ctx: RequestContext, gates: Sequence[Gate]) -> JSONResponse | None:
    """Return the first terminal response produced by *gates*, if any."""
    for gate in gates:
        response = gate(ctx)
        if response is not None:
            return response
    return None


def get_context(request: Request) -> RequestContext:
    """FastAPI dependency: the context built by ``SessionMiddleware``."""
    return request.state.context


def client_ip(conn: HTTPConnection, *, trust_proxy: bool) -> str:
    """Caller address, honouring ``X-Forwarded-For`` behind a proxy."""
    if trust_proxy:
        forwarded = conn.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if conn.client is None:
        return ""
    return conn.client.host


def log_in(request: Request, sessions: SessionStore, user: User) -> RequestContext:
    """Bind *user* to a freshly rotated session for this browser."""
    ctx = get_context(request)
    session = sessions.rotate(ctx.session.token, user.id)
    ctx = dataclasses.replace(ctx, session=session, user=user)
    request.state.context = ctx
    logger.info("User '%s' logged in", user.username)
    return ctx


def log_out(request: Request, sessions: SessionStore) -> RequestContext:
    """Drop the principal from the current session."""
    ctx = get_context(request)
    if ctx.user is not None:
        sessions.clear(ctx.session.token)
        logger.info("User '%s' logged out", ctx.user.username)
    ctx = dataclasses.replace(
        ctx, session=ctx.session.model_copy(update={"user_id": None}), user=None,
    )
    request.state.context = ctx
    return ctx


class SessionMiddleware(BaseHTTPMiddleware):
    """Attach a session (and its user, if any) to every HTTP request.

    A browser without a valid cookie gets a new anonymous session on first
    contact.  The cookie is (re)written whenever the handler ends up with a
    different token than the browser sent, e.g. after login rotation.
    """

    def __init__(
        self,
        app,  # noqa: ANN001
        *,
        sessions: SessionStore,
        users: UserStore,
        config: ChatConfig,
    ) -> None:
        super().__init__(app)
        self._sessions = sessions
        self._users = users
        self._cookie_name = config.session.cookie_name
        self._secure = config.session.secure_cookie
        self._trust_proxy = config.server.trust_proxy

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        incoming = request.cookies.get(self._cookie_name)
        session = self._sessions.get(incoming)
        if session is None:
            session = self._sessions.create()

        user = None
        if session.is_authenticated:
            user = self._users.find_by_id(session.user_id)
            if user is None:
                logger.warning("Session bound to missing user %s", session.user_id)

        request.state.context = RequestContext(
            session=session,
            user=user,
            client_ip=client_ip(request, trust_proxy=self._trust_proxy),
        )

        response = await call_next(request)

        token = request.state.context.session.token
        if token != incoming:
            response.set_cookie(
                key=self._cookie_name,
                value=token,
                httponly=True,
                samesite="lax",
                secure=self._secure,
                path="/",
            )
        return response
