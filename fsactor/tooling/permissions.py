from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Static operation → capability table.

Unknown operations have no entry and are always denied.
"""

from collections.abc import Collection
from types import MappingProxyType

from fsactor.schemas import Capability, OperationKind

REQUIRED_CAPABILITY: MappingProxyType[OperationKind, Capability] = MappingProxyType({
    OperationKind.READ_FILE: Capability.READ,
    OperationKind.LIST_FILES: Capability.READ,
    OperationKind.WRITE_FILE: Capability.WRITE,
    OperationKind.EDIT_FILE: Capability.WRITE,
    OperationKind.CREATE_DIR: Capability.WRITE,
    OperationKind.DELETE_FILE: Capability.WRITE,
})


def required_capability(operation: str | OperationKind) -> Capability | None:
    """Return the capability *operation* needs, or ``None`` if it is unknown."""
    kind = operation if isinstance(operation, OperationKind) else OperationKind.parse(operation)
    if kind is None:
        return None
    return REQUIRED_CAPABILITY.get(kind)


def is_allowed(operation: str | OperationKind, permissions: Collection[str]) -> bool:
    """Decide whether *operation* may run under *permissions*."""
    capability = required_capability(operation)
    if capability is None:
        return False
    return capability.value in permissions
