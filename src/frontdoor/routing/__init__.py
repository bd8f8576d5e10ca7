"""Routing — trie-based route table shared by the server and its collaborators.

Routes are registered by ``RoutedService`` implementations before the
server starts and looked up per request in O(path-depth).
"""

from frontdoor.routing.protocol import RoutedService
from frontdoor.routing.route import Route, RouteMatch
from frontdoor.routing.router import Router

__all__ = ["Route", "RouteMatch", "RoutedService", "Router"]
