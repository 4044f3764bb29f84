"""Unit tests for the HTTP store transport and the retry wrapper."""
# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from fsactor.chain.transport import HttpStoreTransport, RetryingStoreTransport, StoreTransport
from fsactor.exceptions import StoreDecodeError, StoreTransportError


def _transport(handler) -> HttpStoreTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpStoreTransport("http://store.test/", client=client)


# ── HttpStoreTransport ────────────────────────────────────


class TestHttpStoreTransport:
    def test_satisfies_protocol(self):
        assert isinstance(_transport(lambda r: httpx.Response(200)), StoreTransport)

    def test_url_substitutes_handle(self):
        transport = HttpStoreTransport("http://store.test/", request_path="/v1/{handle}/rpc")
        assert transport.url_for("abc") == "http://store.test/v1/abc/rpc"
        transport.close()

    def test_posts_request_bytes(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b'{"status":"ok"}')

        body = _transport(handler).send("s1", b'{"x":1}')
        assert body == b'{"status":"ok"}'
        assert seen[0].method == "POST"
        assert str(seen[0].url) == "http://store.test/stores/s1/requests"
        assert seen[0].content == b'{"x":1}'
        assert seen[0].headers["Content-Type"] == "application/json"

    def test_http_error_status(self):
        transport = _transport(lambda r: httpx.Response(503))
        with pytest.raises(StoreTransportError) as exc_info:
            transport.send("s1", b"{}")
        assert exc_info.value.status_code == 503

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(StoreTransportError, match="Store unreachable"):
            _transport(handler).send("s1", b"{}")


# ── RetryingStoreTransport ────────────────────────────────


class TestRetryingStoreTransport:
    def test_retries_transport_errors(self):
        inner = MagicMock()
        inner.send.side_effect = [StoreTransportError("down"), StoreTransportError("down"), b"ok"]
        sleeps: list[float] = []
        transport = RetryingStoreTransport(inner, max_retries=3, base_delay=1.0, sleep_fn=sleeps.append)
        assert transport.send("s1", b"{}") == b"ok"
        assert inner.send.call_count == 3
        assert sleeps == [1.0, 2.0]

    def test_gives_up_after_max_retries(self):
        inner = MagicMock()
        inner.send.side_effect = StoreTransportError("down")
        transport = RetryingStoreTransport(inner, max_retries=2, sleep_fn=lambda _: None)
        with pytest.raises(StoreTransportError):
            transport.send("s1", b"{}")
        assert inner.send.call_count == 3

    def test_other_store_errors_are_not_retried(self):
        inner = MagicMock()
        inner.send.side_effect = StoreDecodeError("bad")
        transport = RetryingStoreTransport(inner, max_retries=5, sleep_fn=lambda _: None)
        with pytest.raises(StoreDecodeError):
            transport.send("s1", b"{}")
        assert inner.send.call_count == 1

    def test_delay_is_capped(self):
        inner = MagicMock()
        inner.send.side_effect = [StoreTransportError("x")] * 4 + [b"ok"]
        sleeps: list[float] = []
        transport = RetryingStoreTransport(
            inner, max_retries=4, base_delay=10.0, max_delay=15.0, sleep_fn=sleeps.append,
        )
        transport.send("s1", b"{}")
        assert sleeps == [10.0, 15.0, 15.0, 15.0]
