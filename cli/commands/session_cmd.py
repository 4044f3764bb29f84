# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import argparse
import json
import logging
from contextlib import closing

from cli.commands._common import cli_config, fail, read_input

logger = logging.getLogger("fsactor.cli")


def _open_store():  # noqa: ANN202
    from fsactor.paths import get_sessions_dir
    from fsactor.session_store import SessionStore

    return SessionStore(get_sessions_dir())


# ── Init Session ───────────────────────────────────────────


def cmd_init_session(args: argparse.Namespace) -> None:
    """Create a new session from config defaults and CLI overrides."""
    from pydantic import ValidationError

    from fsactor.exceptions import FsActorError
    from fsactor.schemas import Session

    try:
        session = cli_config(args).session.new_session()
        overrides: dict = {}
        if args.base_path is not None:
            overrides["base_path"] = args.base_path
        if args.permission is not None:
            overrides["permissions"] = sorted(set(args.permission))
        if args.instance_name is not None:
            overrides["instance_name"] = args.instance_name
        if overrides:
            session = Session.model_validate({**session.model_dump(), **overrides})
        _open_store().create(args.name, session)
    except ValidationError as e:
        fail(f"invalid session fields: {e.errors()[0]['msg']}")
    except FsActorError as e:
        fail(str(e))

    print(f"Created session '{args.name}' (base_path={session.base_path}, "
          f"permissions={','.join(session.permissions) or '-'})")


# ── Handle ─────────────────────────────────────────────────


def cmd_handle(args: argparse.Namespace) -> None:
    """Dispatch one envelope and persist the resulting session."""
    from fsactor.actor import build_dispatcher, build_transport
    from fsactor.config import resolve_log_level
    from fsactor.exceptions import FsActorError
    from fsactor.logging_config import setup_instance_logging
    from fsactor.paths import get_logs_dir

    try:
        envelope = json.loads(read_input(args.file))
    except json.JSONDecodeError as e:
        fail(f"envelope is not valid JSON: {e}")

    store = _open_store()
    try:
        config = cli_config(args)
        session = store.load(args.name)
        if session.instance_name:
            setup_instance_logging(
                session.instance_name,
                get_logs_dir(),
                level=resolve_log_level(config),
                also_to_console=False,
            )
        with closing(build_transport(config)) as transport:
            dispatcher = build_dispatcher(config, transport=transport)
            reply, next_session = dispatcher.handle_request(envelope, session)
        if next_session != session:
            store.save(args.name, next_session)
    except FsActorError as e:
        fail(str(e))

    print(reply.model_dump_json(exclude_none=True, indent=2))


# ── History ────────────────────────────────────────────────


def _summarize(entry) -> str:  # noqa: ANN001
    chat = entry.chat_message
    if chat is None:
        return f"[rollup: {len(entry.data.responses)} response(s)]"
    role = "user" if chat.is_user else "assistant"
    lines = chat.content_text().strip().splitlines()
    return f"{role}: {lines[0] if lines else ''}"


def cmd_history(args: argparse.Namespace) -> None:
    """Print the chain from HEAD back towards the root."""
    from fsactor.actor import build_transport
    from fsactor.chain import ChainLoader
    from fsactor.exceptions import FsActorError

    try:
        session = _open_store().load(args.name)
        with closing(build_transport(cli_config(args))) as transport:
            loader = ChainLoader(transport)
            current = args.head
            for entry in loader.walk(args.head, session, limit=args.limit):
                print(f"{entry.id or current}  {_summarize(entry)}")
                current = entry.parent
    except FsActorError as e:
        fail(str(e))
