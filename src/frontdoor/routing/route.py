"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Key used in the route table for routes that accept every HTTP method
ANY_METHOD = "*"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:    ``/users``        (is_param=False)
    Param:     ``/{id}``         (is_param=True, param_name="id")
    Typed:     ``/{id:int}``     (is_param=True, param_name="id", param_type="int")
    Catch-all: ``/{rest:path}``  (is_param=True, param_type="path")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route. Lives for the lifetime of the process.

    ``methods=None`` accepts every HTTP method.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str] | None = None
    name: str | None = None

    @property
    def method_keys(self) -> frozenset[str]:
        """Keys this route occupies in the route table."""
        if self.methods is None:
            return frozenset({ANY_METHOD})
        return frozenset(m.upper() for m in self.methods)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
