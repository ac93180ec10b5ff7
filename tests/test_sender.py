"""Tests for muxr.server.sender response emission rules."""

import pytest

from muxr.http.response import Response
from muxr.server.sender import send_response


async def _capture(response: Response) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send)
    return messages


class TestSendResponseNoBodyStatuses:
    @pytest.mark.parametrize("status", [101, 204, 304])
    async def test_drops_body_and_sets_zero_content_length(self, status: int) -> None:
        # A handler may attach a body by accident; these statuses never carry one.
        messages = await _capture(Response("unexpected-body").with_status(status))

        assert messages[0]["type"] == "http.response.start"
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["type"] == "http.response.body"
        assert messages[1]["body"] == b""

    async def test_200_preserves_body(self) -> None:
        messages = await _capture(Response("ok"))

        headers = dict(messages[0]["headers"])
        assert messages[0]["status"] == 200
        assert headers[b"content-length"] == b"2"
        assert messages[1]["body"] == b"ok"


class TestSendResponseHeaders:
    async def test_content_type_first_and_names_lowercased(self) -> None:
        response = Response("x", content_type="text/plain").with_header("X-Custom", "Yes")
        messages = await _capture(response)

        headers = messages[0]["headers"]
        assert headers[0] == (b"content-type", b"text/plain")
        assert (b"x-custom", b"Yes") in headers

    async def test_repeated_headers_kept(self) -> None:
        response = Response("x").with_header("Vary", "a").with_header("Vary", "b")
        messages = await _capture(response)

        values = [v for k, v in messages[0]["headers"] if k == b"vary"]
        assert values == [b"a", b"b"]
