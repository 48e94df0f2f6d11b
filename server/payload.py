# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

"""Request body decoding shared by the form and API routes."""

from __future__ import annotations

import json
import re
from typing import Any

from starlette.requests import Request

# Bracketed form keys, e.g. ``geo[latitude]``
_NESTED_KEY_RE = re.compile(r"^(\w+)\[(\w+)\]$")


async def read_payload(request: Request) -> dict[str, Any]:
    """Decode a JSON or form-encoded body into a dict.

    Form keys of the form ``outer[inner]`` are folded into nested dicts.
    A malformed or non-object JSON body decodes to ``{}``.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
        return data if isinstance(data, dict) else {}

    form = await request.form()
    payload: dict[str, Any] = {}
    for key, value in form.multi_items():
        if not isinstance(value, str):
            continue  # uploads are never expected here
        match = _NESTED_KEY_RE.match(key)
        if match:
            outer, inner = match.groups()
            nested = payload.setdefault(outer, {})
            if isinstance(nested, dict):
                nested[inner] = value
        else:
            payload[key] = value
    return payload


def text_field(payload: dict[str, Any], key: str) -> str:
    """String value of *key*, or ``""`` when missing or not a string."""
    value = payload.get(key)
    return value if isinstance(value, str) else ""
