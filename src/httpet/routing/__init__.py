"""Routing — a small trie router compiled when the app freezes."""

from httpet.routing.route import Route, RouteMatch
from httpet.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
