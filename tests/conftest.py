# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
"""Global test fixtures for FsActor.

Provides filesystem isolation and config cache management for all test
modules.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env at module level; cli_main() does the same for CLI usage.
load_dotenv()


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an isolated FsActor runtime data directory.

    - Redirects ``FSACTOR_DATA_DIR`` to a temp directory
    - Invalidates the config cache before and after the test
    """
    from fsactor.config import invalidate_cache

    d = tmp_path / ".fsactor"
    (d / "sessions").mkdir(parents=True)
    (d / "logs").mkdir()

    monkeypatch.setenv("FSACTOR_DATA_DIR", str(d))
    monkeypatch.delenv("FSACTOR_LOG_LEVEL", raising=False)
    invalidate_cache()

    yield d

    invalidate_cache()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Sandbox root for LocalFileResource tests."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root
