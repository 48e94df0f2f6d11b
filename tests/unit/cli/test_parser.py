"""Unit tests for cli/parser.py — argparse configuration and cli_main."""
# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from cli.parser import _lazy_create_user, _lazy_start, build_parser, cli_main


class TestParserCommands:
    def test_start_defaults(self):
        args = build_parser().parse_args(["start"])
        assert args.command == "start"
        assert args.host is None
        assert args.port is None
        assert args.func is _lazy_start

    def test_start_overrides(self):
        args = build_parser().parse_args(["start", "--host", "127.0.0.1", "--port", "8080"])
        assert args.host == "127.0.0.1"
        assert args.port == 8080

    def test_create_user(self):
        args = build_parser().parse_args(
            ["create-user", "alice", "--password", "secret", "--name", "Alice"],
        )
        assert args.username == "alice"
        assert args.password == "secret"
        assert args.name == "Alice"
        assert args.func is _lazy_create_user

    def test_create_user_requires_password(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["create-user", "alice"])

    def test_config_set(self):
        args = build_parser().parse_args(["config", "set", "server.port", "8080"])
        assert args.config_command == "set"
        assert args.key == "server.port"
        assert args.value == "8080"

    def test_config_list_flags(self):
        args = build_parser().parse_args(["config", "list", "--section", "geo", "--show-secrets"])
        assert args.section == "geo"
        assert args.show_secrets is True

    def test_data_dir_global_option(self):
        args = build_parser().parse_args(["--data-dir", "/tmp/chat", "start"])
        assert args.data_dir == "/tmp/chat"


class TestCliMain:
    def test_data_dir_applied_before_command(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GEOCHAT_DATA_DIR", raising=False)
        seen: dict[str, str | None] = {}

        def fake_start(args):
            seen["data_dir"] = os.environ.get("GEOCHAT_DATA_DIR")

        with (
            patch("cli.parser._lazy_start", side_effect=fake_start),
            patch("core.logging_config.setup_logging"),
        ):
            cli_main(["--data-dir", str(tmp_path), "start"])

        assert seen["data_dir"] == str(tmp_path)

    def test_file_logging_only_for_start(self, data_dir):
        with (
            patch("core.logging_config.setup_logging") as mock_setup,
            patch("core.config.cli.cmd_config_list"),
        ):
            cli_main(["config", "list"])
        assert mock_setup.call_args.kwargs["log_dir"] is None

    def test_log_level_from_config_file(self, data_dir):
        with (
            patch("core.logging_config.setup_logging") as mock_setup,
            patch("core.config.cli.cmd_config_list"),
        ):
            cli_main(["config", "list"])
        assert mock_setup.call_args.kwargs["level"] == "DEBUG"

    def test_log_level_env_override(self, data_dir, monkeypatch):
        monkeypatch.setenv("GEOCHAT_LOG_LEVEL", "WARNING")
        with (
            patch("core.logging_config.setup_logging") as mock_setup,
            patch("core.config.cli.cmd_config_list"),
        ):
            cli_main(["config", "list"])
        assert mock_setup.call_args.kwargs["level"] == "WARNING"

    def test_no_command_prints_help(self, data_dir, capsys):
        with patch("core.logging_config.setup_logging"):
            cli_main([])
        assert "usage: geochat" in capsys.readouterr().out
