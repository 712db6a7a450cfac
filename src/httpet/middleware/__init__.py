"""Middleware — request/response interceptors.

Built-ins:

- ``StaticFiles``: serve the bundled stylesheet under ``/static``
- ``AccessLog``: one JSON line per request on ``httpet.access``
"""

from httpet.middleware.access_log import AccessLog
from httpet.middleware.protocol import Middleware, Next
from httpet.middleware.static import StaticFiles

__all__ = ["AccessLog", "Middleware", "Next", "StaticFiles"]
