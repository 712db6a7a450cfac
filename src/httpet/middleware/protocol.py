"""Middleware protocol.

A middleware is any async callable shaped like::

    async def mw(request: Request, next: Next) -> Response: ...

Functions and objects with ``__call__`` both qualify; there is no base
class.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from httpet.http.request import Request
from httpet.http.response import Response

# The rest of the pipeline, as seen from one middleware
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    async def __call__(self, request: Request, next: Next) -> Response: ...
