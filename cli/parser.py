# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="FsActor - Filesystem Command Actor"
    )
    parser.add_argument(
        "--config", default=None, metavar="PATH",
        help="Config file (default: <data-dir>/config.json)",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Override runtime data directory (default: ~/.fsactor or FSACTOR_DATA_DIR)",
    )
    sub = parser.add_subparsers(dest="command")

    # ── Init Session ──────────────────────────────────────
    p_init = sub.add_parser("init-session", help="Create a persisted actor session")
    p_init.add_argument("name", help="Session name")
    p_init.add_argument("--base-path", default=None, help="Base path for relative command paths")
    p_init.add_argument(
        "--permission", action="append", default=None, choices=["read", "write"],
        help="Grant a capability (repeatable; default from config)",
    )
    p_init.add_argument("--instance-name", default=None, help="Only honor blocks scoped to this name")
    p_init.set_defaults(func=_lazy_init_session)

    # ── Handle ────────────────────────────────────────────
    p_handle = sub.add_parser("handle", help="Dispatch one envelope against a session")
    p_handle.add_argument("name", help="Session name")
    p_handle.add_argument("--file", default=None, help="Envelope JSON file (default: stdin)")
    p_handle.set_defaults(func=_lazy_handle)

    # ── Extract ───────────────────────────────────────────
    p_extract = sub.add_parser("extract", help="Print the commands found in a text (dry run)")
    p_extract.add_argument("--file", default=None, help="Input text file (default: stdin)")
    p_extract.add_argument("--scope", default=None, help="Instance name to scope blocks to")
    p_extract.set_defaults(func=_lazy_extract)

    # ── Guide ─────────────────────────────────────────────
    p_guide = sub.add_parser("guide", help="Print the capability guide")
    p_guide.add_argument("--instance-name", default=None, help="Scope the example block")
    p_guide.add_argument("--html", action="store_true", help="Print the HTML rendering")
    p_guide.set_defaults(func=_lazy_guide)

    # ── History ───────────────────────────────────────────
    p_history = sub.add_parser("history", help="Walk the chain back from a head entry")
    p_history.add_argument("name", help="Session name")
    p_history.add_argument("head", help="Head entry id")
    p_history.add_argument("--limit", type=int, default=20, help="Maximum entries (default: 20)")
    p_history.set_defaults(func=_lazy_history)

    # ── Serve ─────────────────────────────────────────────
    p_serve = sub.add_parser("serve", help="Run the HTTP host")
    p_serve.add_argument("--host", default=None, help="Bind host (default from config)")
    p_serve.add_argument("--port", type=int, default=None, help="Bind port (default from config)")
    p_serve.set_defaults(func=_lazy_serve)

    return parser


def cli_main(argv: list[str] | None = None) -> None:
    from dotenv import load_dotenv

    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    # Apply --data-dir override before any command
    if args.data_dir:
        os.environ["FSACTOR_DATA_DIR"] = args.data_dir

    from fsactor.config import load_config, resolve_log_level
    from fsactor.exceptions import ConfigError
    from fsactor.logging_config import setup_logging
    from fsactor.paths import get_logs_dir

    args.config_path = Path(args.config) if args.config else None
    try:
        config = load_config(args.config_path, required=args.config_path is not None)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(
        level=resolve_log_level(config),
        log_dir=get_logs_dir(),
        json_file=config.system.json_logs,
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


# ── Lazy import wrappers ──────────────────────────────────


def _lazy_init_session(args: argparse.Namespace) -> None:
    from cli.commands.session_cmd import cmd_init_session

    cmd_init_session(args)


def _lazy_handle(args: argparse.Namespace) -> None:
    from cli.commands.session_cmd import cmd_handle

    cmd_handle(args)


def _lazy_history(args: argparse.Namespace) -> None:
    from cli.commands.session_cmd import cmd_history

    cmd_history(args)


def _lazy_extract(args: argparse.Namespace) -> None:
    from cli.commands.tooling_cmd import cmd_extract

    cmd_extract(args)


def _lazy_guide(args: argparse.Namespace) -> None:
    from cli.commands.tooling_cmd import cmd_guide

    cmd_guide(args)


def _lazy_serve(args: argparse.Namespace) -> None:
    from cli.commands.server import cmd_serve

    cmd_serve(args)
