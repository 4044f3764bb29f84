"""Unit tests for the capability guide."""
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from fsactor.schemas import OperationKind
from fsactor.tooling.extractor import extract
from fsactor.tooling.guide import build_capability_guide, render_guide_html


class TestBuildCapabilityGuide:
    def test_lists_every_operation_with_capability(self):
        text = build_capability_guide()
        for kind in OperationKind:
            assert f"- {kind.value}:" in text
        assert "- write-file: Write to a file (needs <content>) (requires 'write')" in text
        assert "(requires 'read')" in text

    def test_example_block_is_extractable(self):
        [cmd] = extract(build_capability_guide())
        assert (cmd.operation, cmd.path) == ("list-files", ".")

    def test_scoped_example_matches_instance(self):
        text = build_capability_guide("alpha")
        assert '<fs-command name="alpha">' in text
        assert [c.operation for c in extract(text, "alpha")] == ["list-files"]
        assert extract(text, "beta") == []


class TestRenderGuideHtml:
    def test_escapes_markup_inside_code(self):
        html = render_guide_html(build_capability_guide())
        assert "<pre><code>" in html and "</code></pre>" in html
        assert "&lt;fs-command&gt;" in html
        assert "<fs-command>" not in html

    def test_bullets_become_list(self):
        html = render_guide_html("intro\n\n- one\n- two")
        assert html == "<p>intro</p><ul><li>one</li><li>two</li></ul>"

    def test_unterminated_fence_is_closed(self):
        assert render_guide_html("```\ncode").endswith("</code></pre>")
