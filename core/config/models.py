# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of GeoChat core/server, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Central configuration module for GeoChat.

Defines frozen Pydantic models for config.json and provides load / save
helpers.  There is no module-level cache: the loaded ``ChatConfig`` is
handed to ``server.app.create_app`` and passed down explicitly from there.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from core.exceptions import ConfigValidationError

logger = logging.getLogger("geochat.config")

# Environment variables that override values loaded from config.json
_ENV_OVERRIDES: dict[str, tuple[str, ...]] = {
    "GEOCHAT_PORT": ("server", "port"),
    "GEOCHAT_LOG_LEVEL": ("log_level",),
    "GEOCHAT_ENV": ("environment",),
}

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ServerConfig(_Frozen):
    """HTTP listener settings."""

    host: str = "0.0.0.0"
    port: int = 3000
    server_uri: str = ""  # public URL, logged at startup; derived when empty
    trust_proxy: bool = True  # take the caller IP from X-Forwarded-For

    @property
    def public_uri(self) -> str:
        return self.server_uri or f"http://localhost:{self.port}"


class SessionConfig(_Frozen):
    cookie_name: str = "session_token"
    secure_cookie: bool = False


class MessagesConfig(_Frozen):
    page_size: int = 10
    max_text_length: int = 2000

    @model_validator(mode="after")
    def _validate_sizes(self) -> MessagesConfig:
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive (got {self.page_size})")
        if self.max_text_length < 1:
            raise ValueError(
                f"max_text_length must be positive (got {self.max_text_length})"
            )
        return self


class GeoConfig(_Frozen):
    """Geolocation-by-IP upstream service."""

    base_url: str = "http://freegeoip.net/json"
    timeout: float | None = None  # None = wait for the upstream indefinitely


class GuestAccountConfig(_Frozen):
    """Demo account created at startup so visitors can try the chat."""

    enabled: bool = False
    username: str = "guestuser"
    password: str = "guestuser"
    name: str = "Guest"


class ChatConfig(_Frozen):
    version: int = 1
    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"
    database: str | None = None  # SQLite path; None = <data_dir>/geochat.sqlite3
    server: ServerConfig = ServerConfig()
    session: SessionConfig = SessionConfig()
    messages: MessagesConfig = MessagesConfig()
    geo: GeoConfig = GeoConfig()
    guest_account: GuestAccountConfig = GuestAccountConfig()

    def database_path(self) -> Path:
        if self.database:
            return Path(self.database).expanduser()
        from core.paths import get_database_path

        return get_database_path()


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def get_config_path(data_dir: Path | None = None) -> Path:
    """Return the path to config.json inside *data_dir*.

    If *data_dir* is not given, it is resolved via ``core.paths.get_data_dir``
    (imported lazily to avoid circular imports).
    """
    if data_dir is None:
        from core.paths import get_data_dir

        data_dir = get_data_dir()
    return data_dir / "config.json"


# ---------------------------------------------------------------------------
# Load / Save
# ---------------------------------------------------------------------------


def _apply_env_overrides(data: dict[str, Any]) -> None:
    for env_name, keys in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is None:
            continue
        target = data
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value
        logger.debug("Config override from %s", env_name)


def load_config(path: Path | None = None) -> ChatConfig:
    """Load configuration from disk and apply environment overrides.

    If *path* is ``None``, :func:`get_config_path` determines the location.
    When the file does not exist the default configuration is returned.

    Raises:
        ConfigValidationError: the file is not valid JSON or does not match
            the schema.
    """
    if path is None:
        path = get_config_path()

    data: dict[str, Any] = {}
    if path.is_file():
        logger.debug("Loading config from %s", path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.error("Failed to parse %s: %s", path, exc)
            raise ConfigValidationError(f"{path}: {exc}") from exc
    else:
        logger.info("Config file not found at %s; using defaults", path)

    _apply_env_overrides(data)

    try:
        return ChatConfig.model_validate(data)
    except ValidationError as exc:
        logger.error("Invalid config in %s: %s", path, exc)
        raise ConfigValidationError(str(exc)) from exc


def save_config(config: ChatConfig, path: Path | None = None) -> None:
    """Atomically persist *config* to disk as pretty-printed JSON (mode 0o600)."""
    if path is None:
        path = get_config_path()

    path.parent.mkdir(parents=True, exist_ok=True)

    payload = config.model_dump(mode="json")
    text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    tmp = path.with_suffix(".tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)

    # Restrict permissions — the file may contain the guest password.
    try:
        os.chmod(path, 0o600)
    except OSError:
        pass

    logger.debug("Config saved to %s", path)
