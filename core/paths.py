# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Centralized path resolution for GeoChat.

Runtime data directory can be overridden via GEOCHAT_DATA_DIR environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path

# Default runtime data directory
_DEFAULT_DATA_DIR = Path.home() / ".geochat"


def get_data_dir() -> Path:
    """Return the runtime data directory, respecting GEOCHAT_DATA_DIR env var."""
    env_val = os.environ.get("GEOCHAT_DATA_DIR")
    if env_val:
        return Path(env_val).expanduser().resolve()
    return _DEFAULT_DATA_DIR


def get_log_dir() -> Path:
    return get_data_dir() / "logs"


def get_database_path() -> Path:
    return get_data_dir() / "geochat.sqlite3"
