from __future__ import annotations
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Local username/password authentication and registration."""

import logging

from core.auth.hashing import verify_password
from core.auth.models import User
from core.auth.store import UserStore
from core.config.models import GuestAccountConfig
from core.exceptions import DuplicateUsername, InvalidCredentials

logger = logging.getLogger("geochat.auth")

MAX_PASSWORD_LENGTH = 128


def authenticate(users: UserStore, username: str, password: str) -> User:
    """Verify *username*/*password* against the local passport.

    A single verification attempt; every failure mode raises the same
    :class:`InvalidCredentials` so callers cannot tell them apart.
    """
    if len(password) > MAX_PASSWORD_LENGTH:
        logger.warning("Login rejected: password too long for user '%s'", username)
        raise InvalidCredentials()

    user = users.find_by_username(username)
    if user is None:
        logger.warning("Login failed: unknown user '%s'", username)
        raise InvalidCredentials()

    passport = user.local_passport()
    if passport is None:
        logger.warning("Login failed: no local passport for user '%s'", username)
        raise InvalidCredentials()

    if not verify_password(password, passport.password_hash):
        logger.warning("Login failed: wrong password for user '%s'", username)
        raise InvalidCredentials()

    return user


def register(users: UserStore, username: str, password: str, name: str = "") -> User:
    """Create a user unless *username* is already taken.

    Raises:
        DuplicateUsername: the username exists; nothing is created.
        ValidationOrPersistenceFailure: the store rejected the record.
    """
    if users.find_by_username(username) is not None:
        raise DuplicateUsername(username)
    return users.create(username, password, name=name)


def ensure_guest_account(users: UserStore, guest: GuestAccountConfig) -> User | None:
    """Create the demo guest account if enabled and missing."""
    if not guest.enabled:
        return None
    existing = users.find_by_username(guest.username)
    if existing is not None:
        return existing
    user = users.create(guest.username, guest.password, name=guest.name)
    logger.info("Guest account '%s' created", guest.username)
    return user
