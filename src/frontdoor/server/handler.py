"""ASGI dispatcher — the handler the listener serves.

The only component that touches raw ASGI directly. Converts the scope
into a ``Request``, dispatches through the router, and sends the
negotiated ``Response`` back through ASGI ``send()``. Request-time
failures are contained here and never reach the listener.
"""

import logging

from frontdoor._internal.asgi import Receive, Scope, Send
from frontdoor._internal.invoke import invoke
from frontdoor.errors import HTTPError
from frontdoor.http.request import Request
from frontdoor.http.response import Response
from frontdoor.routing.router import Router
from frontdoor.server.negotiation import negotiate
from frontdoor.server.sender import send_response

logger = logging.getLogger("frontdoor.server")


class Dispatcher:
    """ASGI 3.0 application wrapping a router.

    Answers the lifespan protocol itself and routes every HTTP scope.
    """

    __slots__ = ("router",)

    def __init__(self, router: Router) -> None:
        self.router = router

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        try:
            response = await self.dispatch(request)
        except HTTPError as exc:
            response = handle_http_error(exc, request)
        except Exception:
            response = handle_internal_error(request)

        await send_response(response, send, head=request.method == "HEAD")

    async def dispatch(self, request: Request) -> Response:
        """Match *request* and invoke the route's handler."""
        match = self.router.match(request.method, request.path)
        request = request.with_path_params(match.path_params)
        result = await invoke(match.route.handler, request)
        return negotiate(result)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge lifespan startup and shutdown.

        Nothing to set up: routes are registered by the owning server
        before the listener starts.
        """
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a plain-text status response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    response = Response(
        body=exc.detail or f"Error {exc.status}",
        status=exc.status,
        content_type="text/plain; charset=utf-8",
    )
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(request: Request) -> Response:
    """Log the active exception and answer 500."""
    logger.exception("500 %s %s", request.method, request.path)
    return Response(
        body="Internal Server Error",
        status=500,
        content_type="text/plain; charset=utf-8",
    )
