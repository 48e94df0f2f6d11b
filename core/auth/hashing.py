# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

"""Password hashing (Argon2id via pwdlib)."""

from __future__ import annotations

from pwdlib import PasswordHash
from pwdlib.hashers.argon2 import Argon2Hasher

_hasher = PasswordHash((Argon2Hasher(),))


def hash_password(password: str) -> str:
    """Hash a plaintext password with Argon2id."""
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against an Argon2id hash."""
    return _hasher.verify(password, password_hash)
