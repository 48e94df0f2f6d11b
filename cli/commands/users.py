# GeoChat - Realtime Chat Server
# Copyright (C) 2026 GeoChat Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import sys


def cmd_create_user(args: argparse.Namespace) -> None:
    """Create a local user from the command line."""
    from core.auth.manager import register
    from core.auth.store import UserStore
    from core.config import load_config
    from core.database import Database
    from core.exceptions import DuplicateUsername, ValidationOrPersistenceFailure

    config = load_config()
    users = UserStore(Database(config.database_path()))

    try:
        user = register(users, args.username, args.password, name=args.name)
    except DuplicateUsername:
        print(f"Error: user '{args.username}' already exists", file=sys.stderr)
        sys.exit(1)
    except ValidationOrPersistenceFailure as exc:
        print(f"Error: {exc}", file=sys.stderr)
        for err in exc.errors:
            print(f"  {'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        sys.exit(1)

    print(f"Created user '{user.username}' ({user.id})")
