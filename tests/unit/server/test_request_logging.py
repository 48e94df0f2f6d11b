"""Tests for RequestLoggingMiddleware."""
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from server.app import RequestLoggingMiddleware


class TestRequestLoggingMiddleware:
    @pytest.fixture()
    def app(self):
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/api/test")
        async def test_endpoint():
            return {"ok": True}

        @app.get("/ws")
        async def ws_probe():
            return {"ok": True}

        return app

    @pytest.fixture()
    def client(self, app):
        return TestClient(app)

    def test_adds_request_id_header(self, client):
        response = client.get("/api/test")
        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) > 0

    def test_respects_existing_request_id(self, client):
        response = client.get("/api/test", headers={"X-Request-ID": "custom-id-123"})
        assert response.headers["X-Request-ID"] == "custom-id-123"

    def test_noisy_path_not_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="geochat.request"):
            client.get("/ws")
        assert not any("/ws" in rec.getMessage() for rec in caplog.records)

    def test_normal_path_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="geochat.request"):
            client.get("/api/test")
        messages = [rec.getMessage() for rec in caplog.records]
        assert any("GET /api/test -> 200" in m for m in messages)
