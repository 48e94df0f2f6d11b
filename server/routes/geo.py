from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from server.context import RequestContext, get_context, require_user, run_gates
from server.dependencies import Services

logger = logging.getLogger("geochat.routes.geo")

_GEO_GATES = (require_user,)


def create_geo_router(services: Services) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["geo"])

    @router.get("/geo")
    async def geo(ctx: RequestContext = Depends(get_context)):
        """Geolocation of the caller's IP, relayed from the upstream service.

        ``UpstreamFailure`` propagates to the application's error handler.
        """
        denied = run_gates(ctx, _GEO_GATES)
        if denied is not None:
            return denied

        data = await services.geo.lookup(ctx.client_ip)
        return JSONResponse(data, status_code=200)

    return router
