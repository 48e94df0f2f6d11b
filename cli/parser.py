# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import os


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geochat",
        description="GeoChat - realtime chat server",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Override runtime data directory (default: ~/.geochat or GEOCHAT_DATA_DIR)",
    )
    sub = parser.add_subparsers(dest="command")

    # ── Start ─────────────────────────────────────────────
    p_start = sub.add_parser("start", help="Start the GeoChat server")
    p_start.add_argument("--host", default=None, help="Bind address (default: from config)")
    p_start.add_argument("--port", type=int, default=None, help="Port (default: from config)")
    p_start.set_defaults(func=_lazy_start)

    # ── Users ─────────────────────────────────────────────
    p_user = sub.add_parser("create-user", help="Create a local user account")
    p_user.add_argument("username")
    p_user.add_argument("--password", required=True)
    p_user.add_argument("--name", default="", help="Display name (default: username)")
    p_user.set_defaults(func=_lazy_create_user)

    # ── Config ────────────────────────────────────────────
    from core.config.cli import (
        cmd_config_dispatch,
        cmd_config_get,
        cmd_config_list,
        cmd_config_set,
    )

    p_config = sub.add_parser("config", help="Manage configuration")
    p_config.set_defaults(func=cmd_config_dispatch, config_parser=p_config)
    config_sub = p_config.add_subparsers(dest="config_command")

    p_cfg_get = config_sub.add_parser("get", help="Get a config value")
    p_cfg_get.add_argument("key", help="Dot-notation key (e.g. server.port)")
    p_cfg_get.add_argument(
        "--show-secrets", action="store_true", help="Show password values",
    )
    p_cfg_get.set_defaults(func=cmd_config_get)

    p_cfg_set = config_sub.add_parser("set", help="Set a config value")
    p_cfg_set.add_argument("key", help="Dot-notation key")
    p_cfg_set.add_argument("value", help="Value to set")
    p_cfg_set.set_defaults(func=cmd_config_set)

    p_cfg_list = config_sub.add_parser("list", help="List all config values")
    p_cfg_list.add_argument("--section", default=None, help="Filter by section")
    p_cfg_list.add_argument(
        "--show-secrets", action="store_true", help="Show password values",
    )
    p_cfg_list.set_defaults(func=cmd_config_list)

    return parser


def cli_main(argv: list[str] | None = None) -> None:
    from dotenv import load_dotenv

    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    # Apply --data-dir override before any command
    if args.data_dir:
        os.environ["GEOCHAT_DATA_DIR"] = args.data_dir

    from core.config import load_config
    from core.exceptions import ConfigValidationError
    from core.logging_config import setup_logging
    from core.paths import get_log_dir

    # GEOCHAT_LOG_LEVEL is already folded in by load_config. A broken
    # config.json is reported by the command itself.
    try:
        level = load_config().log_level
    except ConfigValidationError:
        level = "INFO"

    setup_logging(
        level=level,
        log_dir=get_log_dir() if args.command == "start" else None,
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


# ── Lazy import wrappers ──────────────────────────────────


def _lazy_start(args: argparse.Namespace) -> None:
    from cli.commands.server import cmd_start

    cmd_start(args)


def _lazy_create_user(args: argparse.Namespace) -> None:
    from cli.commands.users import cmd_create_user

    cmd_create_user(args)
