# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Chat messages: model and SQLite-backed store."""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.auth.models import User
from core.database import Database, utc_now
from core.exceptions import ValidationOrPersistenceFailure

logger = logging.getLogger("geochat.messages")


class Creator(BaseModel):
    """Snapshot of the author taken when the message is created."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    avatar_url: str = ""

    @classmethod
    def from_user(cls, user: User) -> Creator:
        return cls(id=user.id, name=user.name, avatar_url=user.avatar_url)


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    creator: Creator
    text: str
    geo: dict[str, Any] = {}
    created_at: datetime


class _NewMessage(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    text: str = Field(min_length=1)
    geo: dict[str, Any] = {}

    @field_validator("text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


def _row_to_message(row: sqlite3.Row) -> Message:
    return Message(
        id=row["id"],
        creator=json.loads(row["creator"]),
        text=row["text"],
        geo=json.loads(row["geo"]),
        created_at=row["created_at"],
    )


class MessageStore:
    """Append-only message log with newest-first pagination."""

    def __init__(self, db: Database, *, max_text_length: int = 2000) -> None:
        self._db = db
        self._max_text_length = max_text_length

    def create(self, creator: Creator, text: Any, geo: Any = None) -> Message:
        """Validate and persist a message.

        Raises:
            ValidationOrPersistenceFailure: missing/blank/oversized text,
                non-object geo, or a database error.
        """
        try:
            data = _NewMessage(text=text, geo=geo or {})
        except ValidationError as exc:
            raise ValidationOrPersistenceFailure.from_validation_error(
                "Message validation failed", exc,
            ) from exc
        if len(data.text) > self._max_text_length:
            raise ValidationOrPersistenceFailure(
                "Message validation failed",
                errors=[{
                    "loc": ["text"],
                    "msg": f"must be at most {self._max_text_length} characters",
                    "type": "string_too_long",
                }],
            )

        message = Message(
            id=uuid.uuid4().hex,
            creator=creator,
            text=data.text,
            geo=data.geo,
            created_at=utc_now(),
        )
        try:
            with self._db.connect() as conn:
                conn.execute(
                    "INSERT INTO messages (id, creator, text, geo, created_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        message.id,
                        message.creator.model_dump_json(),
                        message.text,
                        json.dumps(message.geo, ensure_ascii=False),
                        message.created_at.isoformat(),
                    ),
                )
        except (sqlite3.Error, TypeError, ValueError) as exc:
            raise ValidationOrPersistenceFailure(str(exc)) from exc

        logger.debug("Message %s stored for %s", message.id, creator.id)
        return message

    def list_recent(self, page: int = 0, page_size: int = 10) -> list[Message]:
        """Return one page of messages, newest first."""
        if page < 0 or page_size < 1:
            raise ValueError(f"invalid page {page} / page_size {page_size}")
        with self._db.connect() as conn:
            rows = conn.execute(
                "SELECT id, creator, text, geo, created_at FROM messages "
                "ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?",
                (page_size, page * page_size),
            ).fetchall()
        return [_row_to_message(r) for r in rows]

    def get(self, message_id: str) -> Message | None:
        with self._db.connect() as conn:
            row = conn.execute(
                "SELECT id, creator, text, geo, created_at FROM messages WHERE id = ?",
                (message_id,),
            ).fetchone()
        return _row_to_message(row) if row else None
