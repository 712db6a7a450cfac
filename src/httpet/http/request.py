"""Immutable HTTP request.

httpet only serves GET and HEAD, so the request carries metadata and
never reads a body.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from httpet.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """Request metadata, frozen at creation."""

    method: str
    path: str
    headers: Headers
    query_string: bytes = b""
    path_params: dict[str, str] = field(default_factory=dict)
    http_version: str = "1.1"
    scheme: str = "http"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    @property
    def host(self) -> str | None:
        """The Host header as sent, port included."""
        return self.headers.get("host")

    @property
    def client_ip(self) -> str | None:
        """Peer address of the connection (not forwarding headers)."""
        return self.client[0] if self.client else None

    @property
    def url(self) -> str:
        """Path plus query string, as it appears in the request line."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    def with_path_params(self, params: dict[str, str]) -> Request:
        return replace(self, path_params=params)

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            scheme=scope.get("scheme", "http"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
