# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger("geochat")


def cmd_start(args: argparse.Namespace) -> None:
    """Start the GeoChat server."""
    import uvicorn

    from core.config import load_config
    from core.exceptions import ConfigValidationError
    from server.app import create_app

    try:
        config = load_config()
    except ConfigValidationError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    host = args.host or config.server.host
    port = args.port or config.server.port
    if args.port and not config.server.server_uri:
        config = config.model_copy(
            update={"server": config.server.model_copy(update={"port": port})},
        )

    display_host = "localhost" if host == "0.0.0.0" else host
    print(f"Chat ready at http://{display_host}:{port}/")

    app = create_app(config)
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=config.log_level.lower(),
        proxy_headers=config.server.trust_proxy,
        timeout_keep_alive=65,
        ws_ping_interval=25,
        ws_ping_timeout=5,
    )
