"""JSON access log.

One line per request on the ``httpet.access`` logger::

    {"timestamp":"2026-02-03T12:34:56.789Z","client_ip":"192.0.2.5",
     "method":"GET","uri":"/404","status":200,"forwarded_for":["203.0.113.1"]}

``client_ip`` is always the socket peer. ``X-Forwarded-For`` and
``X-Real-IP`` are recorded alongside it, never trusted in its place.
A forwarding header that does not parse as IP addresses is logged raw
under ``invalid_forwarded_for`` / ``invalid_real_ip``; the request is
served regardless.
"""

import ipaddress
import json
import logging
from datetime import UTC, datetime
from typing import Any

from httpet.errors import HTTPError
from httpet.http.headers import Headers
from httpet.http.request import Request
from httpet.http.response import Response
from httpet.middleware.protocol import Next

logger = logging.getLogger("httpet.access")


def current_timestamp(now: datetime | None = None) -> str:
    """RFC 3339 UTC with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_forwarded_for(value: str) -> list[str] | None:
    """Parse ``X-Forwarded-For`` into a list of IPs, or ``None`` if malformed."""
    parts = [part.strip() for part in value.split(",")]
    if not parts or any(not part for part in parts):
        return None
    try:
        return [str(ipaddress.ip_address(part)) for part in parts]
    except ValueError:
        return None


def parse_real_ip(value: str) -> str | None:
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None


def forwarding_fields(headers: Headers) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    forwarded = headers.get_list("x-forwarded-for")
    if forwarded:
        raw = ", ".join(forwarded)
        ips = parse_forwarded_for(raw)
        if ips is None:
            fields["invalid_forwarded_for"] = raw
        else:
            fields["forwarded_for"] = ips
    real_ip = headers.get("x-real-ip")
    if real_ip is not None:
        ip = parse_real_ip(real_ip)
        if ip is None:
            fields["invalid_real_ip"] = real_ip
        else:
            fields["real_ip"] = ip
    return fields


class AccessLog:
    """Middleware that writes one JSON line per request.

    Sits outermost so the status it records is the one the client sees,
    including error pages produced from ``HTTPError`` and crashes.
    """

    __slots__ = ("_logger",)

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    async def __call__(self, request: Request, next: Next) -> Response:
        timestamp = current_timestamp()
        try:
            response = await next(request)
        except HTTPError as exc:
            self._emit(timestamp, request, exc.status)
            raise
        except Exception:
            self._emit(timestamp, request, 500)
            raise
        self._emit(timestamp, request, response.status)
        return response

    def _emit(self, timestamp: str, request: Request, status: int) -> None:
        if not self._logger.isEnabledFor(logging.INFO):
            return
        entry: dict[str, Any] = {
            "timestamp": timestamp,
            "client_ip": request.client_ip or "unknown",
            "method": request.method,
            "uri": request.url,
            "status": status,
        }
        entry.update(forwarding_fields(request.headers))
        self._logger.info(json.dumps(entry, separators=(",", ":")))
