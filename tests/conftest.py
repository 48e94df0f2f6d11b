# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
"""Global test fixtures for GeoChat.

Provides filesystem isolation and ready-made application instances.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from tests.helpers.filesystem import create_test_data_dir
from tests.helpers.http import register


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an isolated GeoChat runtime data directory.

    Redirects ``GEOCHAT_DATA_DIR`` to a temp directory and clears the
    environment overrides so a developer's shell does not leak in.
    """
    d = create_test_data_dir(tmp_path)
    monkeypatch.setenv("GEOCHAT_DATA_DIR", str(d))
    for name in ("GEOCHAT_PORT", "GEOCHAT_LOG_LEVEL", "GEOCHAT_ENV"):
        monkeypatch.delenv(name, raising=False)
    return d


@pytest.fixture
def config(data_dir: Path):
    from core.config import load_config

    return load_config()


@pytest.fixture
def db(data_dir: Path):
    from core.database import Database

    return Database(data_dir / "geochat.sqlite3")


@pytest.fixture
def make_app(data_dir: Path):
    """Factory fixture: build an app from the test config plus overrides."""
    from core.config import ChatConfig, load_config
    from server.app import create_app

    def _make(**overrides: Any):
        base = load_config().model_dump()
        base.update(overrides)
        return create_app(ChatConfig.model_validate(base))

    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def alice(client: TestClient) -> TestClient:
    """A client registered and logged in as ``alice``."""
    resp = register(client, "alice", "secret")
    assert resp.status_code == 302
    return client
