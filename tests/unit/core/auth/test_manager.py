"""Unit tests for core/auth/manager.py — local authentication and registration."""
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest

from core.auth.hashing import hash_password, verify_password
from core.auth.manager import authenticate, ensure_guest_account, register
from core.auth.store import UserStore
from core.config.models import GuestAccountConfig
from core.exceptions import DuplicateUsername, InvalidCredentials, ValidationOrPersistenceFailure


@pytest.fixture
def users(db) -> UserStore:
    return UserStore(db)


# ── hashing ──────────────────────────────────────────────


class TestHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret")
        assert hashed != "secret"
        assert hashed.startswith("$argon2")

    def test_verify(self):
        hashed = hash_password("secret")
        assert verify_password("secret", hashed) is True
        assert verify_password("wrong", hashed) is False


# ── authenticate ─────────────────────────────────────────


class TestAuthenticate:
    def test_success_returns_stored_user(self, users: UserStore):
        created = users.create("alice", "secret")
        user = authenticate(users, "alice", "secret")
        assert user.id == created.id

    def test_wrong_password(self, users: UserStore):
        users.create("alice", "secret")
        with pytest.raises(InvalidCredentials):
            authenticate(users, "alice", "wrong")

    def test_unknown_user(self, users: UserStore):
        with pytest.raises(InvalidCredentials):
            authenticate(users, "nobody", "secret")

    def test_failures_are_indistinguishable(self, users: UserStore):
        users.create("alice", "secret")
        with pytest.raises(InvalidCredentials) as unknown:
            authenticate(users, "nobody", "secret")
        with pytest.raises(InvalidCredentials) as wrong:
            authenticate(users, "alice", "wrong")
        assert str(unknown.value) == str(wrong.value)

    def test_password_over_limit_rejected(self, users: UserStore):
        users.create("alice", "secret")
        with pytest.raises(InvalidCredentials):
            authenticate(users, "alice", "x" * 129)


# ── register ─────────────────────────────────────────────


class TestRegister:
    def test_creates_user(self, users: UserStore):
        user = register(users, "alice", "secret", name="Alice")
        assert user.username == "alice"
        assert user.name == "Alice"
        assert users.count() == 1

    def test_duplicate_is_rejected_without_creating(self, users: UserStore):
        register(users, "alice", "secret")
        with pytest.raises(DuplicateUsername):
            register(users, "alice", "other")
        assert users.count() == 1

    def test_duplicate_keeps_original_password(self, users: UserStore):
        register(users, "alice", "secret")
        with pytest.raises(DuplicateUsername):
            register(users, "alice", "other")
        authenticate(users, "alice", "secret")
        with pytest.raises(InvalidCredentials):
            authenticate(users, "alice", "other")

    def test_blank_username_is_a_store_failure(self, users: UserStore):
        with pytest.raises(ValidationOrPersistenceFailure):
            register(users, "  ", "secret")
        assert users.count() == 0


# ── guest account ────────────────────────────────────────


class TestGuestAccount:
    def test_disabled_does_nothing(self, users: UserStore):
        assert ensure_guest_account(users, GuestAccountConfig()) is None
        assert users.count() == 0

    def test_enabled_creates_once(self, users: UserStore):
        guest = GuestAccountConfig(enabled=True)
        first = ensure_guest_account(users, guest)
        second = ensure_guest_account(users, guest)
        assert first is not None and second is not None
        assert first.id == second.id
        assert users.count() == 1
        assert authenticate(users, "guestuser", "guestuser").name == "Guest"
