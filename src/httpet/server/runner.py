"""Serve the app with pounce.

Pounce's ``run()`` takes an import string; httpet has a live app object
built from parsed configuration, so ``pounce.Server`` is driven directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from httpet.app import App

logger = logging.getLogger("httpet.server")


def run_server(
    app: App,
    host: str,
    port: int,
    *,
    debug: bool = False,
    workers: int = 0,
) -> None:
    """Block serving *app* on *host*:*port*.

    Debug runs a single worker with reload; otherwise *workers* are
    started (0 lets pounce pick from the CPU count).
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if debug else workers,
        reload=debug,
    )
    logger.info("Serving %s on http://%s:%d", app.config.base_domain, host, port)
    Server(config, app).run()
