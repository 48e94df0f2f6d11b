# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

"""Server-side HTML rendering (Jinja2).

The same ``partials/chat_message.html`` fragment backs the index page, the
``POST /api/message`` response and the realtime broadcast; only the viewer
differs.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.auth.models import User
from core.messages import Message

TEMPLATES_DIR = Path(__file__).parent / "templates"


class ViewRenderer:
    def __init__(self, templates_dir: Path = TEMPLATES_DIR) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_message(self, message: Message, viewer: User | None = None) -> str:
        """Render one message; *viewer* marks the reader's own messages."""
        template = self._env.get_template("partials/chat_message.html")
        return template.render(message=message, user=viewer)

    def render_index(self, messages: list[Message], viewer: User | None = None) -> str:
        template = self._env.get_template("index.html")
        return template.render(messages=messages, user=viewer)
