"""httpet exception hierarchy.

Shared across the registry, router, handler, and views so every module
raises and catches the same types.

Request-shape problems (unknown animals, malformed status codes) are
never exceptions: the resolver downgrades them to a fallback asset.
"""

from dataclasses import dataclass
from pathlib import Path


class HttpetError(Exception):
    """Base for all httpet-specific errors."""


class ConfigurationError(HttpetError):
    """Raised when startup configuration is unusable.

    Covers a malformed base domain, an unreadable image directory, a
    missing site default image, or an image directory with no animals.
    The server must not start serving when this is raised.
    """


class AssetUnavailable(HttpetError):  # noqa: N818
    """A registered asset could not be read from disk.

    The registry listed the file at startup, so this is a deployment
    inconsistency rather than a request problem. Mapped to a 500.
    """

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"asset {path} is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class HTTPError(HttpetError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or views. The ASGI handler catches these and
    renders the themed error page for ``status``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
