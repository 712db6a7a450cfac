"""httpet application.

Mutable during setup (routes, middleware). Frozen on first use: the
lifespan startup, the first request, or ``app.run()``.
"""

import logging
import threading
from dataclasses import dataclass

from kida import Environment

from httpet._internal.asgi import Receive, Scope, Send
from httpet.config import HttpetConfig
from httpet.middleware.access_log import AccessLog
from httpet.middleware.protocol import Middleware, Next
from httpet.middleware.static import StaticFiles
from httpet.pets.dispatcher import RequestDispatcher
from httpet.pets.registry import AnimalRegistry
from httpet.pets.resolver import AssetResolver
from httpet.routing.route import Handler, Route
from httpet.routing.router import Router
from httpet.server.handler import build_pipeline, handle_request
from httpet.templating import create_environment

logger = logging.getLogger("httpet.server")

DEFAULT_METHODS = ("GET",)


@dataclass(slots=True)
class _PendingRoute:
    path: str
    handler: Handler
    methods: tuple[str, ...]
    name: str | None


class App:
    """The ASGI application.

    ``config`` must already be validated (``create_app`` does this).
    The registry and dispatcher are shared read-only by every request.

    Thread safety:
        Setup is single-threaded. Freezing uses a lock with a double
        check so concurrent first requests compile the app exactly once.
    """

    __slots__ = (
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_middleware_list",
        "_pending_routes",
        "_pipeline",
        "_registry",
        "config",
    )

    def __init__(self, config: HttpetConfig, registry: AnimalRegistry) -> None:
        self.config = config
        self._registry = registry
        self._dispatcher = RequestDispatcher(config.base_domain, AssetResolver(registry))
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._freeze_lock = threading.Lock()
        self._frozen = False

        self._pipeline: Next | None = None
        self._kida_env: Environment | None = None

    @property
    def registry(self) -> AnimalRegistry:
        return self._registry

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def kida_env(self) -> Environment:
        self._ensure_frozen()
        assert self._kida_env is not None
        return self._kida_env

    # -- Setup --

    def add_route(
        self,
        path: str,
        handler: Handler,
        *,
        methods: tuple[str, ...] = DEFAULT_METHODS,
        name: str | None = None,
    ) -> None:
        """Register *handler* for *path*. GET routes also answer HEAD."""
        self._check_not_frozen()
        self._pending_routes.append(_PendingRoute(path, handler, methods, name))

    def add_middleware(self, middleware: Middleware) -> None:
        """Append a middleware; the first one added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def run(self) -> None:
        from httpet.server.runner import run_server

        self._ensure_frozen()
        run_server(
            self,
            self.config.host,
            self.config.port,
            debug=self.config.debug,
            workers=self.config.workers,
        )

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        match scope["type"]:
            case "lifespan":
                await self._handle_lifespan(receive, send)
            case "http":
                self._ensure_frozen()
                assert self._pipeline is not None
                await handle_request(
                    scope,
                    receive,
                    send,
                    pipeline=self._pipeline,
                    kida_env=self._kida_env,
                    debug=self.config.debug,
                )
            case _:
                # websocket and server-specific scopes are not served
                return

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            match message["type"]:
                case "lifespan.startup":
                    try:
                        self._ensure_frozen()
                    except Exception as exc:
                        logger.exception("Startup failed")
                        await send({"type": "lifespan.startup.failed", "message": str(exc)})
                        return
                    logger.info(
                        "httpet ready for *.%s (%d animals)",
                        self.config.base_domain,
                        len(self._registry),
                    )
                    await send({"type": "lifespan.startup.complete"})
                case "lifespan.shutdown":
                    await send({"type": "lifespan.shutdown.complete"})
                    return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile routes, middleware and templates. Hold ``_freeze_lock``."""
        router = Router()
        for pending in self._pending_routes:
            methods = {m.upper() for m in pending.methods}
            if "GET" in methods:
                methods.add("HEAD")
            router.add(Route(pending.path, pending.handler, frozenset(methods), pending.name))
        router.compile()

        self._pipeline = build_pipeline(router, tuple(self._middleware_list))
        self._kida_env = create_environment(self.config)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the app after it has started serving requests."
            raise RuntimeError(msg)


def create_app(config: HttpetConfig, registry: AnimalRegistry | None = None) -> App:
    """Build the full service: validated config, registry, middleware, views.

    Raises ``ConfigurationError`` if the configuration or the image
    directory is unusable. Pass *registry* to skip the directory scan.
    """
    from httpet.views import register_views

    config = config.validate()
    if registry is None:
        registry = AnimalRegistry.scan(config.image_dir)

    app = App(config, registry)
    app.add_middleware(AccessLog())
    if config.static_dir is not None:
        app.add_middleware(StaticFiles(config.static_dir, prefix=config.static_url))
    register_views(app)
    return app
