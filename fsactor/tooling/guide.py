from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Capability guide sent in reply to an introduction."""

import html

from fsactor.schemas import OperationKind
from fsactor.tooling.permissions import REQUIRED_CAPABILITY

_DESCRIPTIONS: dict[OperationKind, str] = {
    OperationKind.READ_FILE: "Read file contents",
    OperationKind.WRITE_FILE: "Write to a file (needs <content>)",
    OperationKind.EDIT_FILE: "Replace every <old_text> with <new_text> in a file",
    OperationKind.LIST_FILES: "List directory contents",
    OperationKind.CREATE_DIR: "Create a new directory",
    OperationKind.DELETE_FILE: "Delete a file",
}


def build_capability_guide(instance_name: str | None = None) -> str:
    """Build the markdown guide listing operations and their permissions."""
    opening = f'<fs-command name="{instance_name}">' if instance_name else "<fs-command>"
    lines = [
        "🤖 Filesystem operations are now available! You can use commands like:",
        "",
    ]
    for kind, capability in REQUIRED_CAPABILITY.items():
        lines.append(f"- {kind.value}: {_DESCRIPTIONS[kind]} (requires '{capability.value}')")
    lines += [
        "",
        "Use XML syntax like:",
        "```xml",
        opening,
        "  <operation>list-files</operation>",
        "  <path>.</path>",
        "</fs-command>",
        "```",
    ]
    if instance_name:
        lines += ["", f"Only blocks addressed to name=\"{instance_name}\" are processed."]
    return "\n".join(lines)


def render_guide_html(text: str) -> str:
    """Render the guide as HTML, keeping code fences as ``<pre>`` blocks."""
    parts: list[str] = []
    in_code = False
    paragraph: list[str] = []
    items: list[str] = []

    def _flush() -> None:
        if paragraph:
            parts.append("<p>" + "<br>".join(paragraph) + "</p>")
            paragraph.clear()
        if items:
            parts.append("<ul>" + "".join(f"<li>{i}</li>" for i in items) + "</ul>")
            items.clear()

    for line in text.splitlines():
        if line.startswith("```"):
            _flush()
            parts.append("</code></pre>" if in_code else "<pre><code>")
            in_code = not in_code
            continue
        if in_code:
            parts.append(html.escape(line) + "\n")
        elif line.startswith("- "):
            items.append(html.escape(line[2:]))
        elif line:
            paragraph.append(html.escape(line))
        else:
            _flush()
    _flush()
    if in_code:
        parts.append("</code></pre>")
    return "".join(parts)
