# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

"""Helpers shared by the CLI subcommands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from fsactor.config import FsActorConfig, load_config


def cli_config(args: argparse.Namespace) -> FsActorConfig:
    """Config selected by ``--config`` (cached after the first load)."""
    path = getattr(args, "config_path", None)
    return load_config(path, required=path is not None)


def read_input(path: str | None) -> str:
    """Read *path*, or stdin when no path is given."""
    if path:
        return Path(path).read_text(encoding="utf-8")
    return sys.stdin.read()


def fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)
