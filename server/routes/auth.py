from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

"""Authentication routes: local login, logout and registration.

All three answer with a redirect to the index page whatever the outcome;
failures are only visible in the logs.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from core.auth.manager import authenticate, register
from core.exceptions import DuplicateUsername, InvalidCredentials, ValidationOrPersistenceFailure
from server.context import log_in, log_out
from server.dependencies import Services
from server.payload import read_payload, text_field

logger = logging.getLogger("geochat.routes.auth")


def _to_index() -> RedirectResponse:
    return RedirectResponse("/", status_code=302)


def create_auth_router(services: Services) -> APIRouter:
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("/local")
    async def login(request: Request):
        body = await read_payload(request)
        try:
            user = authenticate(
                services.users,
                text_field(body, "username"),
                text_field(body, "password"),
            )
        except InvalidCredentials:
            return _to_index()

        log_in(request, services.sessions, user)
        return _to_index()

    @router.get("/logout")
    async def logout(request: Request):
        log_out(request, services.sessions)
        return _to_index()

    @router.post("/local/register")
    async def register_local(request: Request):
        body = await read_payload(request)
        username = text_field(body, "username")
        password = text_field(body, "password")

        try:
            register(services.users, username, password, name=text_field(body, "name"))
        except DuplicateUsername:
            logger.warning("Registration ignored: username '%s' already taken", username)
            return _to_index()
        except ValidationOrPersistenceFailure as exc:
            logger.warning("Registration failed for '%s': %s", username, exc)
            return _to_index()

        try:
            user = authenticate(services.users, username, password)
        except InvalidCredentials:
            return _to_index()

        log_in(request, services.sessions, user)
        return _to_index()

    return router
