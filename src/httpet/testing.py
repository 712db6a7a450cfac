"""In-process test client.

Drives the ASGI app directly (no sockets) and hands back the same
``Response`` type the views produce.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from httpet.app import App
from httpet.http.response import Response


class TestClient:
    """Async test client for httpet apps.

    ``host`` sets the Host header, which is how httpet picks the animal::

        async with TestClient(app) as client:
            response = await client.get("/404", host="dog.example.org")
            assert response.header("x-httpet-animal") == "dog"
    """

    __test__ = False  # not a pytest test class
    __slots__ = ("app", "client_addr", "default_host")

    def __init__(
        self,
        app: App,
        *,
        default_host: str | None = None,
        client_addr: tuple[str, int] = ("127.0.0.1", 50000),
    ) -> None:
        self.app = app
        self.default_host = default_host if default_host is not None else app.config.base_domain
        self.client_addr = client_addr

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        return self

    async def __aexit__(self, *args: object) -> None:
        pass

    async def get(
        self,
        path: str,
        *,
        host: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        return await self.request("GET", path, host=host, headers=headers)

    async def head(
        self,
        path: str,
        *,
        host: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> Response:
        return await self.request("HEAD", path, host=host, headers=headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        host: str | None = None,
        headers: dict[str, str] | None = None,
        send_host: bool = True,
    ) -> Response:
        """Send one request through the app.

        Pass ``send_host=False`` to omit the Host header entirely.
        """
        path_part, _, query_string = path.partition("?")

        raw_headers: list[tuple[bytes, bytes]] = []
        if send_host:
            raw_headers.append((b"host", (host or self.default_host).encode("latin-1")))
        for name, value in (headers or {}).items():
            raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "scheme": "http",
            "path": path_part,
            "raw_path": quote(path_part).encode("ascii"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": self.client_addr,
        }

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": b"", "more_body": False}

        status = 500
        content_type = ""
        response_headers: list[tuple[str, str]] = []
        body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal status, content_type
            if message["type"] == "http.response.start":
                status = message["status"]
                for name_b, value_b in message.get("headers", []):
                    name = name_b.decode("latin-1")
                    value = value_b.decode("latin-1")
                    if name == "content-type":
                        content_type = value
                    else:
                        response_headers.append((name, value))
            elif message["type"] == "http.response.body":
                body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        return Response(
            body=b"".join(body_parts),
            status=status,
            content_type=content_type,
            headers=tuple(response_headers),
        )
