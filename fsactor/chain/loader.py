from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Retrieval of chain entries from the external store.

Protocol (one round trip per entry, no retries here)::

    request:  {"_type": "request", "data": {"Get": "<entry id>"}}
    response: {"status": "ok", "value": [<bytes>]}                   (older stores)
              {"status": "ok", "data": {"Get": {"value": [<bytes>]}}}  (newer stores)

The byte array is the JSON-serialized :class:`ChainEntry`.  Every failure
surfaces as a :class:`StoreError`.
"""

import json
import logging
from collections.abc import Iterator
from typing import Any

from pydantic import ValidationError

from fsactor.chain.models import ChainEntry
from fsactor.chain.transport import StoreTransport
from fsactor.exceptions import StoreDecodeError, StoreError, StoreNotConfiguredError
from fsactor.schemas import Session

logger = logging.getLogger("fsactor.chain_loader")


def build_get_request(identifier: str) -> bytes:
    return json.dumps(
        {"_type": "request", "data": {"Get": identifier}},
        separators=(",", ":"),
    ).encode("utf-8")


def _find_value(response: dict[str, Any]) -> Any:
    if "value" in response:
        return response["value"]
    data = response.get("data")
    if isinstance(data, dict):
        get = data.get("Get")
        if isinstance(get, dict):
            return get.get("value")
    return None


def extract_payload(response: Any) -> bytes:
    """Return the entry bytes carried by a decoded store *response*."""
    if not isinstance(response, dict):
        raise StoreDecodeError("Store response is not an object")
    status = response.get("status")
    if status != "ok":
        detail = response.get("error") or response.get("message")
        suffix = f": {detail}" if detail else ""
        raise StoreError(f"Store returned status {status!r}{suffix}")

    value = _find_value(response)
    if value is None:
        raise StoreError("Store response carries no value")
    if not isinstance(value, list):
        raise StoreDecodeError("Expected byte array in store response")
    if not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in value):
        raise StoreDecodeError("Store value is not a valid byte array")
    return bytes(value)


class ChainLoader:
    """Fetch and decode chain entries through a :class:`StoreTransport`."""

    def __init__(self, transport: StoreTransport) -> None:
        self._transport = transport

    def load_entry(self, identifier: str, session: Session) -> ChainEntry:
        """Load the entry *identifier* from the session's store.

        Raises:
            StoreNotConfiguredError: The session has no store handle yet.
            StoreError: Transport, status or decoding failure.
        """
        if not session.store_id:
            raise StoreNotConfiguredError("Store ID not set")

        logger.info("Loading message with ID: %s", identifier)
        response_bytes = self._transport.send(session.store_id, build_get_request(identifier))

        try:
            response = json.loads(response_bytes)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StoreDecodeError(f"Invalid store response: {e}") from e
        logger.debug("Store response status=%s", response.get("status") if isinstance(response, dict) else None)

        payload = extract_payload(response)
        try:
            return ChainEntry.model_validate_json(payload)
        except ValidationError as e:
            raise StoreDecodeError(
                f"Invalid chain entry {identifier}: {e.error_count()} validation error(s)"
            ) from e

    def walk(self, head: str, session: Session, *, limit: int = 50) -> Iterator[ChainEntry]:
        """Yield entries from *head* back along ``parent`` links, newest first.

        Stops at the root, after *limit* entries, or when an id repeats.
        Store failures propagate to the caller.
        """
        seen: set[str] = set()
        current: str | None = head
        while current is not None and len(seen) < limit:
            if current in seen:
                logger.warning("Cycle in chain at %s; stopping walk", current)
                return
            seen.add(current)
            entry = self.load_entry(current, session)
            yield entry
            current = entry.parent
