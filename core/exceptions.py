from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Unified exception hierarchy for GeoChat.

All domain-specific exceptions derive from :class:`GeoChatError`,
enabling callers to catch the entire family with a single clause::

    try:
        ...
    except GeoChatError as e:
        logger.error("Domain error: %s", e)

Errors that cross the HTTP boundary expose ``to_dict()`` so route
handlers can turn them into a structured JSON body.
"""

from typing import Any

from pydantic import ValidationError


class GeoChatError(Exception):
    """Base exception for all GeoChat errors."""


# ── Authentication / authorization ───────────────────────────


class AuthError(GeoChatError):
    """Authentication and authorization errors."""


class InvalidCredentials(AuthError):
    """Unknown username or wrong password.

    Deliberately carries no detail: callers must not learn which of the
    two conditions occurred.
    """

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class Forbidden(AuthError):
    """The request carries no authenticated principal."""

    def __init__(self, message: str = "not authenticated", *, status: int = 403) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "message": self.message}


# ── Storage ──────────────────────────────────────────────────


class StoreError(GeoChatError):
    """Credential / message store errors."""


class ValidationOrPersistenceFailure(StoreError):
    """A record failed validation or could not be written.

    ``errors`` holds the per-field details in the shape pydantic reports
    them (``loc`` / ``msg`` / ``type``).
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @classmethod
    def from_validation_error(
        cls, message: str, exc: ValidationError,
    ) -> ValidationOrPersistenceFailure:
        return cls(
            message,
            errors=[
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": "ValidationError",
            "message": self.message,
            "errors": self.errors,
        }


class DuplicateUsername(ValidationOrPersistenceFailure):
    """A user with the same username already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(
            f"username '{username}' is already taken",
            errors=[{"loc": ["username"], "msg": "already taken", "type": "unique"}],
        )
        self.username = username


# ── Upstream services ────────────────────────────────────────


class UpstreamFailure(GeoChatError):
    """Transport or parse failure talking to a third-party HTTP service."""

    def __init__(self, message: str, *, status: int = 500) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "message": self.message}


# ── Configuration ────────────────────────────────────────────


class ConfigError(GeoChatError):
    """Configuration errors."""


class ConfigValidationError(ConfigError):
    """Configuration validation failure."""
