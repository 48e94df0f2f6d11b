"""Unit tests for core/paths.py and core/database.py."""
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pathlib import Path

import pytest

from core.database import Database, utc_now
from core.paths import get_data_dir, get_database_path, get_log_dir


class TestPaths:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GEOCHAT_DATA_DIR", str(tmp_path))
        assert get_data_dir() == tmp_path.resolve()
        assert get_log_dir() == tmp_path.resolve() / "logs"
        assert get_database_path() == tmp_path.resolve() / "geochat.sqlite3"

    def test_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("GEOCHAT_DATA_DIR", raising=False)
        assert get_data_dir() == Path.home() / ".geochat"


class TestDatabase:
    def test_schema_created(self, tmp_path: Path):
        db = Database(tmp_path / "nested" / "chat.sqlite3")
        with db.connect() as conn:
            tables = {
                row["name"]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            }
        assert {"users", "sessions", "messages"} <= tables
        assert db.path.exists()

    def test_wal_mode(self, db):
        with db.connect() as conn:
            assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"

    def test_rollback_on_error(self, db):
        with pytest.raises(RuntimeError):
            with db.connect() as conn:
                conn.execute(
                    "INSERT INTO sessions (token, created_at) VALUES ('t', ?)", (utc_now(),),
                )
                raise RuntimeError("boom")
        with db.connect() as conn:
            assert conn.execute("SELECT COUNT(*) FROM sessions").fetchone()[0] == 0

    def test_utc_now_sorts_lexically(self):
        first, second = utc_now(), utc_now()
        assert first <= second
        assert first.endswith("+00:00")
