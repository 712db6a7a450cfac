"""Tests for httpet.server.sender — Response to ASGI messages."""

from typing import Any

import pytest

from httpet.http.response import Response
from httpet.server.sender import body_allowed, send_response


class _Capture:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def headers(self) -> dict[bytes, bytes]:
        return dict(self.messages[0]["headers"])

    @property
    def body(self) -> bytes:
        return self.messages[1]["body"]


class TestBodyAllowed:
    @pytest.mark.parametrize(
        ("status", "allowed"),
        [(200, True), (101, False), (204, False), (304, False), (500, True)],
    )
    def test_statuses(self, status: int, allowed: bool) -> None:
        assert body_allowed(status) is allowed


class TestSendResponse:
    async def test_basic(self) -> None:
        send = _Capture()
        await send_response(Response(b"woof", content_type="image/jpeg"), send)
        assert send.messages[0]["status"] == 200
        assert send.headers[b"content-type"] == b"image/jpeg"
        assert send.headers[b"content-length"] == b"4"
        assert send.body == b"woof"

    async def test_header_names_lowercased(self) -> None:
        send = _Capture()
        await send_response(Response("x").with_header("X-Httpet-Animal", "dog"), send)
        assert send.headers[b"x-httpet-animal"] == b"dog"

    async def test_not_modified_has_no_body(self) -> None:
        send = _Capture()
        await send_response(Response(b"woof", status=304), send)
        assert send.body == b""
        assert send.headers[b"content-length"] == b"0"

    async def test_head_keeps_length_drops_body(self) -> None:
        send = _Capture()
        await send_response(Response(b"woof"), send, head=True)
        assert send.headers[b"content-length"] == b"4"
        assert send.body == b""

    async def test_sender_owns_content_length(self) -> None:
        send = _Capture()
        await send_response(Response(b"woof").with_header("Content-Length", "99"), send)
        lengths = [v for k, v in send.messages[0]["headers"] if k == b"content-length"]
        assert lengths == [b"4"]
