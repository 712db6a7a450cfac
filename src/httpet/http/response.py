"""HTTP responses with a chainable ``.with_*()`` API.

Each transformation returns a new Response; middleware adds headers
without mutating what the view returned.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str] | tuple[tuple[str, str], ...]) -> Response:
        new = tuple(headers.items()) if isinstance(headers, Mapping) else headers
        return replace(self, headers=(*self.headers, *new))

    def with_body(self, body: str | bytes) -> Response:
        return replace(self, body=body)

    def header(self, name: str) -> str | None:
        """First value of a header set on this response, case-insensitive."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


def json_response(data: Any, *, status: int = 200) -> Response:
    """Serialize *data* as a JSON response."""
    return Response(
        body=json.dumps(data, separators=(",", ":")),
        status=status,
        content_type="application/json",
    )


def redirect(url: str, status: int = 302) -> Response:
    return Response(body="", status=status).with_header("Location", url)
