"""Router with trie-based path matching.

Static segments win over parameters, parameters win over trailing
``{name:path}`` catch-alls. A catch-all consumes zero or more remaining
segments, which is how prefix routes (``/static/...``) and the index
fallback (``/...``) are expressed.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NoReturn

from frontdoor.errors import ConfigurationError, MethodNotAllowed, NotFound
from frontdoor.routing.params import CONVERTERS
from frontdoor.routing.route import ANY_METHOD, PathSegment, Route, RouteMatch

logger = logging.getLogger("frontdoor.routing")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"             -> [PathSegment("users")]
        "/users/{id}"        -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}"    -> [..., PathSegment("{id:int}", is_param=True, param_type="int")]
        "/static/{rest:path}" -> [..., PathSegment("{rest:path}", is_param=True, param_type="path")]

    Raises ``ConfigurationError`` for ``<param>`` style segments, unknown
    converters, and a ``path`` converter that is not the last segment.
    """
    segments: list[PathSegment] = []
    parts = [part for part in path.strip("/").split("/") if part]
    for index, part in enumerate(parts):
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> syntax. "
                f"Use {{param}} instead, e.g. {{{part[1:-1]}}}."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Route {path!r} uses unknown converter {param_type!r}."
                raise ConfigurationError(msg)
            if param_type == "path" and index != len(parts) - 1:
                msg = f"Route {path!r}: a {{name:path}} segment must be the last segment."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Trailing catch-all (path converter)
        self.catch_all: _CatchAllEdge | None = None
        # Routes at this node, keyed by HTTP method (or ANY_METHOD)
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all (path) edge — consumes the rest of the path."""

    param_name: str
    routes_by_method: dict[str, Route]


class Router:
    """Route table shared between the server and its collaborators.

    Usage::

        router = Router()
        router.add(Route("/api/users", list_users, frozenset({"GET"})))

        @router.route("/api/users/{id:int}", methods={"GET"})
        def get_user(request):
            ...

        router.add_prefix("/assets", serve_assets)
        match = router.match("GET", "/api/users/42")

    The first registration of a pattern and method wins; later duplicates
    are ignored with a warning.
    Parameter segments at the same position must agree on name and type;
    a disagreeing pattern is rejected with ``ConfigurationError``.
    """

    __slots__ = ("_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []

    # -- Registration --

    def add(self, route: Route) -> bool:
        """Add a route. Returns False if every method it claims was already taken."""
        table = self._insert(route.path)

        added = False
        for key in sorted(route.method_keys):
            existing = table.get(key)
            if existing is not None:
                logger.warning(
                    "Route %s %s already registered by %r; ignoring %r",
                    key,
                    route.path,
                    existing.handler,
                    route.handler,
                )
                continue
            table[key] = route
            added = True

        if added:
            self._routes.append(route)
        return added

    def route(
        self,
        path: str,
        *,
        methods: set[str] | frozenset[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of ``add``."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.add(
                Route(
                    path=path,
                    handler=handler,
                    methods=frozenset(methods) if methods is not None else None,
                    name=name,
                )
            )
            return handler

        return decorator

    def add_prefix(
        self,
        prefix: str,
        handler: Callable[..., Any],
        *,
        methods: frozenset[str] | None = None,
        name: str | None = None,
        param_name: str = "path",
    ) -> bool:
        """Route every path under *prefix* to *handler*.

        The remainder of the path (without the prefix) is passed as the
        ``path`` parameter.
        """
        stripped = prefix.strip("/")
        pattern = f"/{stripped}/{{{param_name}:path}}" if stripped else f"/{{{param_name}:path}}"
        return self.add(Route(path=pattern, handler=handler, methods=methods, name=name))

    # -- Introspection --

    def has(self, path: str, method: str | None = None) -> bool:
        """Whether a route is registered for this exact pattern.

        With *method* set, only a route serving that method (or every
        method) counts.
        """
        table = self._find(path)
        if not table:
            return False
        if method is None:
            return True
        return method.upper() in table or ANY_METHOD in table

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    def _insert(self, path: str) -> dict[str, Route]:
        """Build the trie nodes for a route pattern and return its method table.

        Raises ``ConfigurationError`` when a parameter segment disagrees
        with one already registered at the same position.
        """
        node = self._root
        for seg in parse_path(path):
            name = seg.param_name or ""
            if seg.is_param and seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(param_name=name, routes_by_method={})
                elif node.catch_all.param_name != name:
                    _conflict(path, seg, node.catch_all.param_name, "path")
                return node.catch_all.routes_by_method

            if seg.is_param:
                edge = node.param_child
                if edge is None:
                    pattern, _ = CONVERTERS[seg.param_type]
                    edge = _ParamEdge(
                        param_name=name,
                        param_type=seg.param_type,
                        regex=re.compile(f"^{pattern}$"),
                        node=_TrieNode(),
                    )
                    node.param_child = edge
                elif (edge.param_name, edge.param_type) != (name, seg.param_type):
                    _conflict(path, seg, edge.param_name, edge.param_type)
                node = edge.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        return node.routes_by_method

    def _find(self, path: str) -> dict[str, Route] | None:
        """Return the method table for an exact route pattern, if registered."""
        node = self._root
        for seg in parse_path(path):
            name = seg.param_name or ""
            if seg.is_param and seg.param_type == "path":
                edge = node.catch_all
                if edge is None or edge.param_name != name:
                    return None
                return edge.routes_by_method

            if seg.is_param:
                param = node.param_child
                if param is None or (param.param_name, param.param_type) != (name, seg.param_type):
                    return None
                node = param.node
            else:
                child = node.children.get(seg.value)
                if child is None:
                    return None
                node = child

        return node.routes_by_method

    # -- Matching --

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path against the registered routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if only routes for other methods match.
        """
        method = method.upper()
        parts = [p for p in path.strip("/").split("/") if p]
        allowed: set[str] = set()

        result = self._match_node(self._root, parts, 0, {}, method, allowed)
        if result is not None:
            return result

        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"No route matches {method} {path!r}")

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
        method: str,
        allowed: set[str],
    ) -> RouteMatch | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            route = _select(node.routes_by_method, method, allowed)
            if route is not None:
                return RouteMatch(route=route, path_params=params)
            # A catch-all below this node also matches an empty remainder
            if node.catch_all is not None:
                return _match_catch_all(node.catch_all, "", params, method, allowed)
            return None

        part = parts[index]

        # 1. Static child (exact match)
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, params, method, allowed)
            if result is not None:
                return result

        # 2. Parameter child
        if node.param_child is not None:
            edge = node.param_child
            if edge.regex.match(part):
                new_params = {**params, edge.param_name: part}
                result = self._match_node(edge.node, parts, index + 1, new_params, method, allowed)
                if result is not None:
                    return result

        # 3. Catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return _match_catch_all(node.catch_all, remaining, params, method, allowed)

        return None


def _conflict(path: str, seg: PathSegment, name: str, param_type: str) -> NoReturn:
    msg = (
        f"Route path {path!r}: segment {seg.value!r} conflicts with "
        f"'{{{name}:{param_type}}}' already registered at the same position. "
        "Routes sharing a parameter position must use the same name and type."
    )
    raise ConfigurationError(msg)


def _select(routes_by_method: dict[str, Route], method: str, allowed: set[str]) -> Route | None:
    """Pick the route for *method*, recording the alternatives on a miss."""
    route = routes_by_method.get(method) or routes_by_method.get(ANY_METHOD)
    if route is None:
        allowed.update(routes_by_method)
    return route


def _match_catch_all(
    edge: _CatchAllEdge,
    remaining: str,
    params: dict[str, str],
    method: str,
    allowed: set[str],
) -> RouteMatch | None:
    route = _select(edge.routes_by_method, method, allowed)
    if route is None:
        return None
    return RouteMatch(route=route, path_params={**params, edge.param_name: remaining})
