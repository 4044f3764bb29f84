from __future__ import annotations
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.


"""Transports carrying chain-store requests.

A transport moves opaque request bytes to the store identified by a
handle and returns the response bytes.  Failures raise
:class:`StoreTransportError`.
"""

import logging
import time
from collections.abc import Callable
from typing import Protocol, runtime_checkable

import httpx

from fsactor.exceptions import StoreTransportError

logger = logging.getLogger("fsactor.store_transport")


@runtime_checkable
class StoreTransport(Protocol):
    def send(self, handle: str, request: bytes) -> bytes: ...


class HttpStoreTransport:
    """POST requests to an HTTP-fronted chain store.

    The URL is ``base_url + request_path`` with ``{handle}`` substituted.
    """

    def __init__(
        self,
        base_url: str,
        *,
        request_path: str = "/stores/{handle}/requests",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._request_path = request_path
        self._client = client or httpx.Client(timeout=timeout)

    def url_for(self, handle: str) -> str:
        return self._base_url + self._request_path.format(handle=handle)

    def send(self, handle: str, request: bytes) -> bytes:
        url = self.url_for(handle)
        try:
            resp = self._client.post(
                url,
                content=request,
                headers={"Content-Type": "application/json"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("store request failed url=%s status=%d", url, status)
            raise StoreTransportError(f"HTTP {status} from store", status_code=status) from e
        except httpx.HTTPError as e:
            logger.error("store request failed url=%s error=%s", url, e)
            raise StoreTransportError(f"Store unreachable: {e}") from e
        logger.debug("store request ok url=%s bytes=%d", url, len(resp.content))
        return resp.content

    def close(self) -> None:
        self._client.close()


class RetryingStoreTransport:
    """Retry transport failures of *inner* with exponential backoff.

    The chain loader itself makes exactly one round trip; this wrapper is
    the place for retries.  Only :class:`StoreTransportError` is retried;
    the delay before retry ``n`` is ``base_delay * 2**(n-1)`` capped at
    *max_delay*.
    """

    def __init__(
        self,
        inner: StoreTransport,
        *,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        self._inner = inner
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._sleep = sleep_fn

    def delay_for(self, retry: int) -> float:
        return min(self._base_delay * (2 ** (retry - 1)), self._max_delay)

    def send(self, handle: str, request: bytes) -> bytes:
        retry = 0
        while True:
            try:
                return self._inner.send(handle, request)
            except StoreTransportError as e:
                if retry >= self._max_retries:
                    logger.error("store request gave up handle=%s attempts=%d", handle, retry + 1)
                    raise
                retry += 1
                wait = self.delay_for(retry)
                logger.warning(
                    "store request failed handle=%s retry=%d/%d wait=%.1fs: %s",
                    handle, retry, self._max_retries, wait, e,
                )
                self._sleep(wait)

    def close(self) -> None:
        close = getattr(self._inner, "close", None)
        if close is not None:
            close()
