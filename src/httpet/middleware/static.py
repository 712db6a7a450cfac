"""Static file middleware for the bundled stylesheet and friends.

Paths under the prefix are served from a directory; everything else
falls through to the next handler.
"""

import mimetypes
from pathlib import Path

import anyio.to_thread

from httpet.errors import NotFound
from httpet.http.request import Request
from httpet.http.response import Response
from httpet.middleware.protocol import Next


class StaticFiles:
    """Serve files under *prefix* from *directory*.

    Symlinks are resolved and the final path must stay inside
    *directory*; anything escaping it gets a 403 and a missing file a 404.

    ::

        app.add_middleware(StaticFiles("./static", prefix="/static"))
    """

    __slots__ = ("_cache_control", "_directory", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._prefix = "/" + prefix.strip("/")
        self._cache_control = cache_control

    @property
    def prefix(self) -> str:
        return self._prefix

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method not in ("GET", "HEAD"):
            return await next(request)
        if not request.path.startswith(self._prefix + "/"):
            return await next(request)

        relative = request.path[len(self._prefix) + 1 :]
        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory):
            return Response(body="Forbidden", status=403, content_type="text/plain; charset=utf-8")
        if not file_path.is_file():
            raise NotFound(f"No static file {relative!r}")

        body = await anyio.to_thread.run_sync(file_path.read_bytes)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return Response(
            body=body,
            content_type=content_type or "application/octet-stream",
        ).with_header("Cache-Control", self._cache_control)
