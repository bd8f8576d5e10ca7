"""Route registration protocol — the contract collaborators implement.

Any object with a ``register_routes(router)`` method can attach its
endpoints to the server. No base class, no registration decorator::

    class HealthService:
        def register_routes(self, router: Router) -> None:
            router.add(Route("/health", self.health, frozenset({"GET"})))

        def health(self, request):
            return {"status": "ok"}

    server.add_routes(HealthService())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from frontdoor.routing.router import Router


@runtime_checkable
class RoutedService(Protocol):
    """A component that serves requests by adding routes to a router.

    The router is borrowed for the duration of the call; implementations
    must not keep it or expect ownership.
    """

    def register_routes(self, router: Router) -> None: ...
