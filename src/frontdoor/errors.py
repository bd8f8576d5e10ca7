"""Frontdoor exception hierarchy.

Shared across Router, Server, the request handler, and the built-in
fallback routes so every module raises and catches the same types.
"""

from dataclasses import dataclass


class FrontdoorError(Exception):
    """Base for all frontdoor-specific errors."""


class ConfigurationError(FrontdoorError):
    """Raised when server configuration or a route pattern is invalid.

    The server catches these during construction and degrades instead
    of failing to start.
    """


class ServerError(FrontdoorError):
    """Raised when the server lifecycle is misused or cannot complete."""


class ServerClosedError(ServerError):
    """Raised by ``Server.shutdown()`` when there is no open listener."""


@dataclass(frozen=True, slots=True)
class HTTPError(FrontdoorError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or by handlers. The ASGI dispatcher catches
    these and answers with a plain-text status response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class Forbidden(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """403 — the resource exists outside what may be served."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
