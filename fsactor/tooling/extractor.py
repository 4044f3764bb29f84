from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Extraction of ``<fs-command>`` blocks from chat text.

Chat text is only loosely structured, so this is a marker scanner rather
than an XML parser: blocks and their fields are located by plain
substring search, and anything incomplete or out of order is skipped
instead of reported.  Extraction never raises.

Recognised markup::

    <fs-command name="scope">
      <operation>edit-file</operation>
      <path>notes.txt</path>
      <old_text>foo</old_text>
      <new_text>bar</new_text>
    </fs-command>
"""

import logging
import re
from collections.abc import Iterator

from fsactor.schemas import Command

logger = logging.getLogger("fsactor.extractor")

BLOCK_TAG = "fs-command"

# Opening marker, bare or carrying a name attribute in either quote style.
_BLOCK_OPEN_RE = re.compile(
    r"<" + BLOCK_TAG + r"(?:\s+name\s*=\s*([\"'])(?P<name>[^\"']*)\1)?\s*>"
)
_BLOCK_CLOSE = f"</{BLOCK_TAG}>"

OPTIONAL_FIELDS = ("content", "old_text", "new_text")


# ── Scanner ───────────────────────────────────────────────


def find_marker_pair(text: str, open_marker: str, close_marker: str) -> str | None:
    """Return the text between the first *open_marker* and first *close_marker*.

    Both markers are located independently (first occurrence wins).  When
    either is missing, or the closing marker comes before the end of the
    opening one, the pair counts as absent and ``None`` is returned.
    """
    open_at = text.find(open_marker)
    if open_at == -1:
        return None
    close_at = text.find(close_marker)
    if close_at == -1:
        return None
    start = open_at + len(open_marker)
    if close_at < start:
        return None
    return text[start:close_at]


def find_field(block: str, name: str) -> str | None:
    """Return the first ``<name>...</name>`` value inside *block*."""
    return find_marker_pair(block, f"<{name}>", f"</{name}>")


def iter_blocks(text: str) -> Iterator[tuple[str | None, str]]:
    """Yield ``(scope_name, body)`` for every complete block, in source order.

    A block runs from an opening marker to the next closing marker.  If
    another opening marker shows up first, the earlier block is treated as
    unterminated and scanning restarts at the later one.
    """
    pos = 0
    while True:
        opening = _BLOCK_OPEN_RE.search(text, pos)
        if opening is None:
            return
        close_at = text.find(_BLOCK_CLOSE, opening.end())
        if close_at == -1:
            return
        reopening = _BLOCK_OPEN_RE.search(text, opening.end(), close_at)
        if reopening is not None:
            logger.debug("Unterminated %s block at offset %d", BLOCK_TAG, opening.start())
            pos = reopening.start()
            continue
        yield opening.group("name"), text[opening.end():close_at]
        pos = close_at + len(_BLOCK_CLOSE)


# ── Public API ────────────────────────────────────────────


def decode_block(body: str) -> Command | None:
    """Decode one block body, or return ``None`` when a required field is missing."""
    operation = find_field(body, "operation")
    path = find_field(body, "path")
    if operation is None or path is None:
        return None
    return Command(
        operation=operation,
        path=path,
        **{name: find_field(body, name) for name in OPTIONAL_FIELDS},
    )


def extract(raw_text: str, scope_name: str | None = None) -> list[Command]:
    """Extract commands from *raw_text* in source order.

    Args:
        raw_text: Chat message content.
        scope_name: When given, only blocks whose opening marker carries
            ``name="<scope_name>"`` are read.  Unscoped callers read every
            block.

    Returns:
        One :class:`Command` per well-formed block.  Malformed blocks are
        dropped without affecting their siblings.
    """
    commands: list[Command] = []
    skipped = 0
    for block_scope, body in iter_blocks(raw_text):
        if scope_name is not None and block_scope != scope_name:
            continue
        command = decode_block(body)
        if command is None:
            skipped += 1
            continue
        commands.append(command)
    if skipped:
        logger.debug("Skipped %d malformed %s block(s)", skipped, BLOCK_TAG)
    return commands
