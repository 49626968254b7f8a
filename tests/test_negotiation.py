"""Tests for frontdoor.server.negotiation — adapter return values to responses."""

import pytest

from frontdoor.http.response import Redirect, Response, StreamingResponse
from frontdoor.server.negotiation import negotiate


class TestNegotiate:
    def test_response_passthrough(self) -> None:
        original = Response(body="hello", status=201)
        assert negotiate(original) is original

    def test_streaming_passthrough(self) -> None:
        original = StreamingResponse(iter([b"x"]))
        assert negotiate(original) is original

    def test_redirect(self) -> None:
        result = negotiate(Redirect("/code/"))
        assert result.status == 302
        assert ("Location", "/code/") in result.headers

    def test_str_is_html(self) -> None:
        result = negotiate("<p>hi</p>")
        assert result.status == 200
        assert "text/html" in result.content_type

    def test_bytes_are_octet_stream(self) -> None:
        assert negotiate(b"\x00").content_type == "application/octet-stream"

    def test_tuple_overrides_status(self) -> None:
        assert negotiate(("gone", 410)).status == 410

    def test_unknown_type(self) -> None:
        with pytest.raises(TypeError):
            negotiate(42)
