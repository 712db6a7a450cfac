"""Route definitions and match results."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from httpet.http.request import Request
    from httpet.http.response import Response

type Handler = Callable[["Request"], Awaitable["Response"]]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One ``/``-separated piece of a route pattern.

    ``users`` is static; ``{name}`` captures one segment; ``{name:path}``
    captures the rest of the path, slashes included.
    """

    value: str
    param_name: str | None = None
    catch_all: bool = False

    @property
    def is_param(self) -> bool:
        return self.param_name is not None


@dataclass(frozen=True, slots=True)
class Route:
    """A route: pattern, handler, and the methods it answers."""

    path: str
    handler: Handler
    methods: frozenset[str]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """A successful match: the route and its captured parameters."""

    route: Route
    path_params: dict[str, str]
