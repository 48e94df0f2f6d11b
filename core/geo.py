# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

"""Geolocation-by-IP lookup through a third-party HTTP API."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.config.models import GeoConfig
from core.exceptions import UpstreamFailure

logger = logging.getLogger("geochat.geo")


class GeoLocator:
    """Single best-effort round trip per lookup: no cache, no retry."""

    def __init__(self, config: GeoConfig) -> None:
        self._base_url = config.base_url.rstrip("/")
        self._timeout = config.timeout

    def url_for(self, ip: str) -> str:
        return f"{self._base_url}/{ip}"

    async def lookup(self, ip: str) -> Any:
        """Return the decoded JSON the upstream reports for *ip*.

        Raises:
            UpstreamFailure: with status 500 on a transport error or a
                non-JSON 200 body; with the upstream status and its raw body
                as message on any non-200 reply.
        """
        url = self.url_for(ip)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                resp = await client.get(url)
        except httpx.HTTPError as e:
            logger.error("Geo lookup transport error for %s: %s", ip, e)
            raise UpstreamFailure(str(e) or type(e).__name__) from e

        if resp.status_code != 200:
            logger.info("Geo lookup for %s returned HTTP %d", ip, resp.status_code)
            raise UpstreamFailure(resp.text, status=resp.status_code)

        try:
            return json.loads(resp.text)
        except ValueError as e:
            logger.error("Geo lookup for %s returned a non-JSON body", ip)
            raise UpstreamFailure("could not parse response body" + resp.text) from e
