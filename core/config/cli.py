# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""CLI handlers for the ``geochat config`` subcommand."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from core.config.models import ChatConfig, load_config, save_config
from core.exceptions import ConfigValidationError


# ---------------------------------------------------------------------------
# Helper utilities
# ---------------------------------------------------------------------------


def _flatten_dict(d: dict, prefix: str = "") -> list[tuple[str, Any]]:
    """Recursively flatten a nested dict to dot-notation key-value pairs."""
    items: list[tuple[str, Any]] = []
    for k, v in d.items():
        full_key = f"{prefix}.{k}" if prefix else k
        if isinstance(v, dict):
            items.extend(_flatten_dict(v, full_key))
        else:
            items.append((full_key, v))
    return items


def _mask_secret(key: str, value: Any) -> str:
    """Mask password values entirely."""
    if key.endswith("password") and isinstance(value, str) and value:
        return "********"
    return str(value)


def _coerce_value(value: str) -> Any:
    """Coerce a CLI string value to the appropriate Python type.

    Conversion order:
    - ``"null"`` / ``"none"`` (case-insensitive) -> ``None``
    - ``"true"`` / ``"false"`` (case-insensitive) -> ``bool``
    - Integer literal -> ``int``
    - Float literal -> ``float``
    - Otherwise -> ``str``
    """
    lower = value.lower()
    if lower in ("null", "none"):
        return None
    if lower == "true":
        return True
    if lower == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _set_nested(d: dict, keys: list[str], value: Any) -> None:
    """Set a value in a nested dict by key path, creating intermediate dicts."""
    for key in keys[:-1]:
        if key not in d or not isinstance(d[key], dict):
            d[key] = {}
        d = d[key]
    d[keys[-1]] = value


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def cmd_config_dispatch(args: argparse.Namespace) -> None:
    """Entry point for ``geochat config`` without a subcommand."""
    if not getattr(args, "config_command", None):
        args.config_parser.print_help()


def cmd_config_get(args: argparse.Namespace) -> None:
    """Print a single configuration value identified by a dot-notation key."""
    data = load_config().model_dump()

    key: str = args.key
    show_secrets: bool = getattr(args, "show_secrets", False)

    current: Any = data
    for part in key.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            print(f"Error: key '{key}' not found in configuration", file=sys.stderr)
            sys.exit(1)

    display = current if show_secrets else _mask_secret(key, current)
    print(display)


def cmd_config_set(args: argparse.Namespace) -> None:
    """Set a configuration value identified by a dot-notation key."""
    data = load_config().model_dump()

    key: str = args.key
    coerced = _coerce_value(args.value)
    _set_nested(data, key.split("."), coerced)

    try:
        new_config = ChatConfig.model_validate(data)
    except ValueError as exc:
        print(f"Error: invalid value for '{key}': {exc}", file=sys.stderr)
        sys.exit(1)
    save_config(new_config)

    print(f"Set {key} = {_mask_secret(key, coerced)}")


def cmd_config_list(args: argparse.Namespace) -> None:
    """List configuration values as flat dot-notation key = value pairs."""
    try:
        config = load_config()
    except ConfigValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    section: str | None = getattr(args, "section", None)
    show_secrets: bool = getattr(args, "show_secrets", False)

    flat = _flatten_dict(config.model_dump())
    if section:
        flat = [(k, v) for k, v in flat if k.startswith(section)]

    for k, v in flat:
        display = v if show_secrets else _mask_secret(k, v)
        print(f"{k} = {display}")
