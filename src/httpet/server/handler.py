"""ASGI handler — the only place that touches raw HTTP scopes.

Builds a ``Request``, runs it through the middleware chain and the
router, turns exceptions into error pages, and sends the result.
"""

from collections.abc import Sequence

from kida import Environment

from httpet._internal.asgi import Receive, Scope, Send
from httpet.errors import HTTPError
from httpet.http.request import Request
from httpet.http.response import Response
from httpet.middleware.protocol import Middleware, Next
from httpet.routing.router import Router
from httpet.server.errors import handle_http_error, handle_internal_error
from httpet.server.sender import send_response


def build_pipeline(router: Router, middleware: Sequence[Middleware]) -> Next:
    """Wrap route dispatch in *middleware*, first entry outermost."""

    async def dispatch(request: Request) -> Response:
        match = router.match(request.method, request.path)
        return await match.route.handler(request.with_path_params(match.path_params))

    handler: Next = dispatch
    for mw in reversed(middleware):
        handler = _chain(mw, handler)
    return handler


def _chain(mw: Middleware, inner: Next) -> Next:
    async def call(request: Request) -> Response:
        return await mw(request, inner)

    return call


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    pipeline: Next,
    kida_env: Environment | None,
    debug: bool,
) -> None:
    """Process one HTTP request through the full pipeline."""
    request = Request.from_asgi(dict(scope))
    try:
        response = await pipeline(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, kida_env, debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, kida_env, debug)
    await send_response(response, send, head=request.method == "HEAD")
