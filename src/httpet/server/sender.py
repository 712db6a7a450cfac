"""ASGI response sending — Response to ``http.response.start``/``body``."""

from httpet._internal.asgi import Send
from httpet.http.response import Response

# Headers the sender owns; values set on the Response are replaced.
_SENDER_HEADERS = frozenset({"content-type", "content-length"})


def body_allowed(status: int) -> bool:
    """1xx, 204 and 304 responses carry no message body."""
    return not (100 <= status < 200 or status in (204, 304))


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response* through ASGI.

    For HEAD requests the ``Content-Length`` still describes the body a
    GET would have returned, but no body bytes are sent.
    """
    body = response.body_bytes if body_allowed(response.status) else b""

    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
        (b"content-length", str(len(body)).encode("latin-1")),
    ]
    for name, value in response.headers:
        lowered = name.lower()
        if lowered in _SENDER_HEADERS:
            continue
        raw_headers.append((lowered.encode("latin-1"), value.encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send({"type": "http.response.body", "body": b"" if head else body})
