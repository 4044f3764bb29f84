# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from fsactor.tooling.executor import OperationExecutor, resolve_path
from fsactor.tooling.extractor import extract, find_marker_pair
from fsactor.tooling.guide import build_capability_guide, render_guide_html
from fsactor.tooling.permissions import REQUIRED_CAPABILITY, is_allowed, required_capability
from fsactor.tooling.resource import FileResource, LocalFileResource

__all__ = [
    "FileResource",
    "LocalFileResource",
    "OperationExecutor",
    "REQUIRED_CAPABILITY",
    "build_capability_guide",
    "extract",
    "find_marker_pair",
    "is_allowed",
    "render_guide_html",
    "required_capability",
    "resolve_path",
]
