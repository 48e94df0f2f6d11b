from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Authentication data models for GeoChat."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class Passport(BaseModel):
    """A credential record attached to a user.

    Only the Argon2id hash of the secret is ever stored.
    """

    type: Literal["local"] = "local"
    password_hash: str


class User(BaseModel):
    """A registered chat user (the authenticated principal)."""

    id: str
    username: str
    name: str
    avatar_url: str = ""
    passports: list[Passport] = []
    created_at: datetime

    def local_passport(self) -> Passport | None:
        for passport in self.passports:
            if passport.type == "local":
                return passport
        return None

    def to_client(self) -> dict[str, Any]:
        """Public view of the user: never includes credential material."""
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "avatar_url": self.avatar_url,
        }


class NewUser(BaseModel):
    """Registration payload validated before it reaches the store."""

    username: str = Field(max_length=64)
    password: str = Field(max_length=128)
    name: str = ""

    @field_validator("username", "password")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class Session(BaseModel):
    """A browser session: an opaque token bound to at most one user id."""

    token: str
    user_id: str | None = None
    created_at: datetime

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None
