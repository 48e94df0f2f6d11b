from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Credential store: user records keyed by id and by unique username."""

import hashlib
import json
import logging
import sqlite3
import uuid

from pydantic import ValidationError

from core.auth.hashing import hash_password
from core.auth.models import NewUser, Passport, User
from core.database import Database, utc_now
from core.exceptions import DuplicateUsername, ValidationOrPersistenceFailure

logger = logging.getLogger("geochat.auth.store")

_GRAVATAR_URL = "https://www.gravatar.com/avatar/{digest}?d=identicon"


def default_avatar_url(username: str) -> str:
    """Identicon URL derived from the username."""
    digest = hashlib.md5(username.strip().lower().encode("utf-8")).hexdigest()
    return _GRAVATAR_URL.format(digest=digest)


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        name=row["name"],
        avatar_url=row["avatar_url"],
        passports=json.loads(row["passports"]),
        created_at=row["created_at"],
    )


class UserStore:
    """SQLite-backed user records.

    Plaintext passwords handed to :meth:`create` are hashed here; nothing
    outside this store ever writes a password hash.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    def find_by_username(self, username: str) -> User | None:
        with self._db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE username = ?", (username,),
            ).fetchone()
        return _row_to_user(row) if row else None

    def find_by_id(self, user_id: str) -> User | None:
        with self._db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ?", (user_id,),
            ).fetchone()
        return _row_to_user(row) if row else None

    def count(self) -> int:
        with self._db.connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    def create(self, username: str, password: str, name: str = "") -> User:
        """Create a user with a single local passport.

        Raises:
            DuplicateUsername: *username* is taken.
            ValidationOrPersistenceFailure: blank/oversized fields or a
                database error.
        """
        try:
            data = NewUser(username=username, password=password, name=name)
        except ValidationError as exc:
            raise ValidationOrPersistenceFailure.from_validation_error(
                "User validation failed", exc,
            ) from exc

        user = User(
            id=uuid.uuid4().hex,
            username=data.username,
            name=data.name or data.username,
            avatar_url=default_avatar_url(data.username),
            passports=[Passport(type="local", password_hash=hash_password(data.password))],
            created_at=utc_now(),
        )
        passports = json.dumps([p.model_dump() for p in user.passports])
        try:
            with self._db.connect() as conn:
                conn.execute(
                    "INSERT INTO users (id, username, name, avatar_url, passports, created_at) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        user.id,
                        user.username,
                        user.name,
                        user.avatar_url,
                        passports,
                        user.created_at.isoformat(),
                    ),
                )
        except sqlite3.IntegrityError as exc:
            if "users.username" in str(exc):
                raise DuplicateUsername(user.username) from exc
            raise ValidationOrPersistenceFailure(str(exc)) from exc
        except sqlite3.Error as exc:
            raise ValidationOrPersistenceFailure(str(exc)) from exc

        logger.info("Created user '%s' (%s)", user.username, user.id)
        return user
