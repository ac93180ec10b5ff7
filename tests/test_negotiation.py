"""Tests for muxr.server.negotiation — return value to Response."""

import pytest

from muxr.http.response import Response
from muxr.server.negotiation import negotiate


class TestNegotiate:
    def test_response_passthrough(self) -> None:
        original = Response("hi", status=202)
        assert negotiate(original) is original

    def test_str(self) -> None:
        response = negotiate("hello")
        assert response.status == 200
        assert response.text == "hello"
        assert response.content_type == "text/html; charset=utf-8"

    def test_bytes(self) -> None:
        response = negotiate(b"\x00\x01")
        assert response.body == b"\x00\x01"
        assert response.content_type == "application/octet-stream"

    def test_dict(self) -> None:
        response = negotiate({"a": 1})
        assert response.text == '{"a": 1}'
        assert response.content_type == "application/json; charset=utf-8"

    def test_list(self) -> None:
        assert negotiate([1, 2]).text == "[1, 2]"

    def test_none_is_no_content(self) -> None:
        response = negotiate(None)
        assert response.status == 204
        assert response.text == ""

    def test_status_tuple(self) -> None:
        response = negotiate(("created", 201))
        assert response.status == 201
        assert response.text == "created"

    def test_status_headers_tuple(self) -> None:
        response = negotiate(({"id": 1}, 201, {"Location": "/items/1"}))
        assert response.status == 201
        assert response.header("Location") == "/items/1"
        assert response.content_type == "application/json; charset=utf-8"

    def test_unsupported(self) -> None:
        with pytest.raises(TypeError, match="Cannot convert int"):
            negotiate(42)
