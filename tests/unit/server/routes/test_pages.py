"""Tests for server/routes/pages.py — the index page."""
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from fastapi.testclient import TestClient


def test_guest_view(client: TestClient):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert 'action="/auth/local/register"' in resp.text


def test_signed_in_view(alice: TestClient):
    resp = alice.get("/")
    assert "/auth/logout" in resp.text
    assert 'id="chat-input"' in resp.text


def test_lists_latest_page_oldest_first(make_app):
    app = make_app(messages={"page_size": 3})
    client = TestClient(app)
    client.post(
        "/auth/local/register",
        data={"username": "alice", "password": "secret"},
        follow_redirects=False,
    )
    for i in range(5):
        assert client.post("/api/message", json={"text": f"msg-{i}"}).status_code == 201

    html = client.get("/").text
    assert "msg-0" not in html
    assert "msg-1" not in html
    positions = [html.index(f"msg-{i}") for i in (2, 3, 4)]
    assert positions == sorted(positions)
