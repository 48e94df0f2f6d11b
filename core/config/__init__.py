# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from core.config.models import (
    ChatConfig,
    GeoConfig,
    GuestAccountConfig,
    MessagesConfig,
    ServerConfig,
    SessionConfig,
    get_config_path,
    load_config,
    save_config,
)
