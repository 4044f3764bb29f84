# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

"""Message-driven filesystem command actor."""

__version__ = "0.1.0"
