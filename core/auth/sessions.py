from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Server-side browser sessions.

A session maps an opaque token (held in a cookie) to at most one user id.
Only the id is stored; callers re-resolve the full user on every request.
Expiry is left to whoever operates the database.
"""

import logging
import secrets
import sqlite3

from core.auth.models import Session
from core.database import Database, utc_now

logger = logging.getLogger("geochat.auth.sessions")


def _row_to_session(row: sqlite3.Row) -> Session:
    return Session(
        token=row["token"],
        user_id=row["user_id"],
        created_at=row["created_at"],
    )


class SessionStore:
    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self, user_id: str | None = None) -> Session:
        """Issue a new token, anonymous unless *user_id* is given."""
        session = Session(
            token=secrets.token_urlsafe(48),
            user_id=user_id,
            created_at=utc_now(),
        )
        with self._db.connect() as conn:
            conn.execute(
                "INSERT INTO sessions (token, user_id, created_at) VALUES (?, ?, ?)",
                (session.token, session.user_id, session.created_at.isoformat()),
            )
        return session

    def get(self, token: str | None) -> Session | None:
        """Return the ``Session`` for *token*, or ``None`` if invalid."""
        if not token:
            return None
        with self._db.connect() as conn:
            row = conn.execute(
                "SELECT token, user_id, created_at FROM sessions WHERE token = ?",
                (token,),
            ).fetchone()
        return _row_to_session(row) if row else None

    def clear(self, token: str) -> None:
        """Drop the principal from a session, keeping the token alive."""
        with self._db.connect() as conn:
            conn.execute("UPDATE sessions SET user_id = NULL WHERE token = ?", (token,))

    def revoke(self, token: str) -> None:
        with self._db.connect() as conn:
            conn.execute("DELETE FROM sessions WHERE token = ?", (token,))

    def rotate(self, token: str | None, user_id: str) -> Session:
        """Replace *token* by a fresh session bound to *user_id*.

        Used on login so a token issued to an anonymous browser never
        becomes an authenticated one.
        """
        if token:
            self.revoke(token)
        session = self.create(user_id)
        logger.debug("Rotated session for user %s", user_id)
        return session
