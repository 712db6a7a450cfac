"""Error responses.

Maps ``HTTPError`` and unexpected failures to themed HTML pages rendered
from ``error.html``. If the page itself fails to render, a plain text
body with the same status goes out instead.
"""

import logging

from kida import Environment

from httpet.errors import AssetUnavailable, HTTPError
from httpet.http.request import Request
from httpet.http.response import Response
from httpet.pets.status_codes import status_info
from httpet.templating import Template, render_template

logger = logging.getLogger("httpet.server")


def error_page(status: int, detail: str, kida_env: Environment | None) -> Response:
    info = status_info(status)
    title = info.name if info is not None else "Error"
    if kida_env is not None:
        try:
            body = render_template(
                kida_env,
                Template("error.html", status=status, title=title, detail=detail),
            )
        except Exception:
            logger.exception("Failed to render error page for %d", status)
        else:
            return Response(body=body, status=status)
    return Response(
        body=f"{status} {title}\n",
        status=status,
        content_type="text/plain; charset=utf-8",
    )


def handle_http_error(
    exc: HTTPError,
    request: Request,
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    """Render the error page for an ``HTTPError`` raised by routing or a view."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    detail = exc.detail if debug else ""
    return error_page(exc.status, detail, kida_env).with_headers(exc.headers)


def handle_internal_error(
    exc: Exception,
    request: Request,
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    """Log the failure and answer 500."""
    match exc:
        case AssetUnavailable():
            logger.error(
                "500 %s %s: asset %s unavailable (%s)",
                request.method,
                request.path,
                exc.path,
                exc.reason or "unknown reason",
            )
        case _:
            logger.exception("500 %s %s", request.method, request.path)
    detail = f"{type(exc).__name__}: {exc}" if debug else ""
    return error_page(500, detail, kida_env)
