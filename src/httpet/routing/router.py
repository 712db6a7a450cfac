"""Trie router.

Matching prefers, at every depth, a static segment over a ``{param}``
capture, and a capture over a trailing ``{name:path}`` catch-all. The
router is frozen with ``compile()`` before the app serves requests.
"""

from __future__ import annotations

from httpet.errors import ConfigurationError, MethodNotAllowed, NotFound
from httpet.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Split a route pattern into segments.

    ::

        "/info/{segment}"  -> [PathSegment("info"), PathSegment("{segment}", "segment")]
        "/{rest:path}"     -> [PathSegment("{rest:path}", "rest", catch_all=True)]

    Raises ``ConfigurationError`` for unknown converters or a catch-all
    that is not the last segment.
    """
    parts = [part for part in path.strip("/").split("/") if part]
    segments: list[PathSegment] = []
    for position, part in enumerate(parts):
        if part.startswith("<") and part.endswith(">"):
            msg = f"Route {path!r}: use {{param}}, not <param>"
            raise ConfigurationError(msg)
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(part))
            continue
        name, _, converter = part[1:-1].partition(":")
        if converter not in ("", "str", "path"):
            msg = f"Route {path!r}: unknown converter {converter!r}"
            raise ConfigurationError(msg)
        catch_all = converter == "path"
        if catch_all and position != len(parts) - 1:
            msg = f"Route {path!r}: {{{name}:path}} must be the last segment"
            raise ConfigurationError(msg)
        segments.append(PathSegment(part, param_name=name, catch_all=catch_all))
    return segments


class _Node:
    __slots__ = ("catch_all", "methods", "param", "param_name", "static")

    def __init__(self) -> None:
        self.static: dict[str, _Node] = {}
        self.param: _Node | None = None
        self.param_name: str | None = None
        self.catch_all: tuple[str, dict[str, Route]] | None = None
        self.methods: dict[str, Route] = {}


class Router:
    """Maps (method, path) to a ``RouteMatch``.

    ::

        router = Router()
        router.add(Route("/info/{segment}", info, frozenset({"GET", "HEAD"})))
        router.compile()
        router.match("GET", "/info/404").path_params  # {"segment": "404"}
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _Node()
        self._compiled = False

    def add(self, route: Route) -> None:
        if self._compiled:
            msg = "Cannot add routes after compile()"
            raise RuntimeError(msg)

        node = self._root
        for segment in parse_path(route.path):
            if segment.catch_all:
                if node.catch_all is None:
                    node.catch_all = (segment.param_name or "path", {})
                elif node.catch_all[0] != segment.param_name:
                    msg = f"Route {route.path!r}: conflicting catch-all name {segment.param_name!r}"
                    raise ConfigurationError(msg)
                _register(node.catch_all[1], route)
                return
            if segment.is_param:
                if node.param is None:
                    node.param = _Node()
                    node.param_name = segment.param_name
                elif node.param_name != segment.param_name:
                    msg = (
                        f"Route {route.path!r}: parameter {segment.param_name!r} conflicts "
                        f"with {node.param_name!r} at the same position"
                    )
                    raise ConfigurationError(msg)
                node = node.param
            else:
                node = node.static.setdefault(segment.value, _Node())

        _register(node.methods, route)

    def compile(self) -> None:
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the route for *path* and *method*.

        Raises ``NotFound`` when nothing matches the path and
        ``MethodNotAllowed`` when the path matches under other methods.
        """
        parts = [part for part in path.split("/") if part]
        found = _walk(self._root, parts, 0, {})
        if found is None:
            raise NotFound(f"No route matches {method} {path!r}")
        methods, params = found
        route = methods.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(methods))
        return RouteMatch(route=route, path_params=params)


def _register(table: dict[str, Route], route: Route) -> None:
    for method in route.methods:
        if method in table:
            msg = f"Duplicate route: {method} {route.path!r}"
            raise ConfigurationError(msg)
        table[method] = route


def _walk(
    node: _Node,
    parts: list[str],
    index: int,
    params: dict[str, str],
) -> tuple[dict[str, Route], dict[str, str]] | None:
    if index == len(parts):
        return (node.methods, params) if node.methods else None

    part = parts[index]
    child = node.static.get(part)
    if child is not None:
        found = _walk(child, parts, index + 1, params)
        if found is not None:
            return found

    if node.param is not None and node.param_name is not None:
        found = _walk(node.param, parts, index + 1, {**params, node.param_name: part})
        if found is not None:
            return found

    if node.catch_all is not None:
        name, methods = node.catch_all
        return methods, {**params, name: "/".join(parts[index:])}

    return None
