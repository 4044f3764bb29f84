# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse

from cli.commands._common import cli_config


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the HTTP host in the foreground."""
    import uvicorn

    from fsactor.paths import get_data_dir
    from server.app import create_app

    config = cli_config(args)
    app = create_app(config, get_data_dir())
    uvicorn.run(
        app,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_level="info",
        timeout_keep_alive=65,
    )
