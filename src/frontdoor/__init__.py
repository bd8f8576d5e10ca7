"""Frontdoor — an embeddable HTTP front-end for single-page applications.

Owns one listening HTTP(S) endpoint, a router other services extend,
a static file server under ``/static/``, and a fallback route that
renders ``index.html`` with the application's base URL.

Basic usage::

    from frontdoor import Server, ServerConfig

    server = Server(ServerConfig(
        root_path="./web",
        server_root="https://example.com/app",
        port=8080,
    ))
    server.add_routes(api_service)   # anything with register_routes(router)
    server.start()                   # returns immediately
    ...
    server.shutdown()
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "FrontdoorError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "Request",
    "Response",
    "Route",
    "RoutedService",
    "Router",
    "Server",
    "ServerClosedError",
    "ServerConfig",
    "ServerError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import frontdoor`` from pulling in uvicorn and kida until a
    server is actually built.
    """
    if name == "Server":
        from frontdoor.server.webserver import Server

        return Server

    if name == "ServerConfig":
        from frontdoor.config import ServerConfig

        return ServerConfig

    if name in ("Request", "Response"):
        from frontdoor import http as _http

        return getattr(_http, name)

    if name in ("Route", "RoutedService", "Router"):
        from frontdoor import routing as _routing

        return getattr(_routing, name)

    if name in (
        "ConfigurationError",
        "FrontdoorError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "ServerClosedError",
        "ServerError",
    ):
        from frontdoor import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
