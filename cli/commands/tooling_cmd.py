# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse

from cli.commands._common import read_input


def cmd_extract(args: argparse.Namespace) -> None:
    """Print the commands a text would trigger, without executing them."""
    from fsactor.tooling.extractor import extract

    commands = extract(read_input(args.file), args.scope)
    if not commands:
        print("No commands found.")
        return
    for cmd in commands:
        print(cmd.model_dump_json(exclude_none=True))


def cmd_guide(args: argparse.Namespace) -> None:
    from fsactor.tooling.guide import build_capability_guide, render_guide_html

    text = build_capability_guide(args.instance_name)
    print(render_guide_html(text) if args.html else text)
