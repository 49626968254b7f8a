"""Tests for frontdoor.adapters.proxy — single-host reverse proxy."""

import json
from typing import Any

import httpx
import pytest

from frontdoor.adapters.proxy import ReverseProxy, join_url
from frontdoor.app import App
from frontdoor.testing import TestClient


def _echo(request: httpx.Request) -> httpx.Response:
    """Upstream that reports what it received."""
    payload = {
        "method": request.method,
        "url": str(request.url),
        "host": request.headers.get("host"),
        "forwarded_for": request.headers.get("x-forwarded-for"),
        "connection": request.headers.get("connection"),
        "keep_alive": request.headers.get("keep-alive"),
        "body": request.content.decode(),
    }
    return httpx.Response(
        200,
        content=json.dumps(payload).encode(),
        headers={
            "Content-Type": "application/json",
            "X-Upstream": "review",
            "Connection": "close",
        },
    )


def _app(handler: Any, target: str = "http://review.internal:8000/") -> App:
    app = App()
    app.mount("/r/", ReverseProxy(target, transport=httpx.MockTransport(handler)))
    return app


class TestJoinUrl:
    @pytest.mark.parametrize(
        ("base", "path", "query", "expected"),
        [
            ("http://review:8000/", "/r/1", "", "http://review:8000/r/1"),
            ("http://review:8000", "/r/1", "", "http://review:8000/r/1"),
            ("http://docs/godoc", "/pkg/fmt", "", "http://docs/godoc/pkg/fmt"),
            ("http://docs/godoc/", "/pkg/fmt", "m=all", "http://docs/godoc/pkg/fmt?m=all"),
            ("http://docs/?v=1", "/pkg/", "m=all", "http://docs/pkg/?v=1&m=all"),
        ],
    )
    def test_join(self, base: str, path: str, query: str, expected: str) -> None:
        assert join_url(base, path, query) == expected


class TestReverseProxy:
    async def test_passes_response_through(self) -> None:
        async with TestClient(_app(_echo)) as client:
            response = await client.get("/r/1234?tab=files")
        assert response.status == 200
        assert response.content_type == "application/json"
        assert response.header("x-upstream") == "review"
        seen = json.loads(response.body)
        assert seen["url"] == "http://review.internal:8000/r/1234?tab=files"
        assert seen["method"] == "GET"

    async def test_preserves_incoming_host(self) -> None:
        async with TestClient(_app(_echo), host="camlistore.org") as client:
            response = await client.get("/r/")
        assert json.loads(response.body)["host"] == "camlistore.org"

    async def test_appends_forwarded_for(self) -> None:
        async with TestClient(_app(_echo)) as client:
            response = await client.get("/r/", headers={"X-Forwarded-For": "198.51.100.7"})
        assert json.loads(response.body)["forwarded_for"] == "198.51.100.7, 127.0.0.1"

    async def test_drops_hop_by_hop_headers(self) -> None:
        async with TestClient(_app(_echo)) as client:
            response = await client.get(
                "/r/",
                headers={"Connection": "keep-alive, X-Private", "Keep-Alive": "timeout=5"},
            )
        seen = json.loads(response.body)
        assert seen["keep_alive"] is None
        assert response.header("connection") is None

    async def test_forwards_body(self) -> None:
        async with TestClient(_app(_echo)) as client:
            response = await client.post("/r/upload", body=b"patch-set-3")
        seen = json.loads(response.body)
        assert seen["method"] == "POST"
        assert seen["body"] == "patch-set-3"

    async def test_upstream_status_kept(self) -> None:
        def not_found(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="no such change")

        async with TestClient(_app(not_found)) as client:
            response = await client.get("/r/999")
        assert response.status == 404
        assert response.text == "no such change"

    async def test_connection_failure_is_502(self, caplog: Any) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with TestClient(_app(refuse)) as client:
            response = await client.get("/r/1")
        assert response.status == 502
        assert "proxy error" in caplog.text

    async def test_client_pooled_and_closed_at_shutdown(self) -> None:
        proxy = ReverseProxy("http://review.internal:8000/", transport=httpx.MockTransport(_echo))
        app = App()
        app.mount("/r/", proxy)
        app.on_shutdown(proxy.aclose)

        async with TestClient(app) as client:
            await client.get("/r/1")
            pooled = proxy._client
            await client.get("/r/2")
            assert proxy._client is pooled
        assert pooled is not None
        assert pooled.is_closed
        assert proxy._client is None

    async def test_client_reopened_after_close(self) -> None:
        proxy = ReverseProxy("http://review.internal:8000/", transport=httpx.MockTransport(_echo))
        app = App()
        app.mount("/r/", proxy)

        async with TestClient(app) as client:
            await client.get("/r/1")
            await proxy.aclose()
            response = await client.get("/r/2")
        assert response.status == 200
        await proxy.aclose()
