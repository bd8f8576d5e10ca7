"""The Server — lifecycle of the listening endpoint and its routes.

Construction parses configuration and builds an empty router.
Collaborators attach routes through ``add_routes()``. ``start()``
installs the static and index fallback routes, chooses TLS or plain
HTTP, and serves on a background thread. ``shutdown()`` hard-closes
the listener.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from urllib.parse import unquote, urlsplit

from frontdoor.config import ServerConfig
from frontdoor.errors import ConfigurationError, ServerClosedError, ServerError
from frontdoor.routing.protocol import RoutedService
from frontdoor.routing.route import ANY_METHOD, Route
from frontdoor.routing.router import Router
from frontdoor.server.handler import Dispatcher
from frontdoor.server.index import IndexPage
from frontdoor.server.listener import Listener
from frontdoor.server.static import StaticFiles
from frontdoor.server.tls import select_tls

logger = logging.getLogger("frontdoor.server")

INDEX_PATTERN = "/{path:path}"


def exit_process(message: str) -> None:
    """Default fatal handler: log and terminate the process with status 1."""
    logger.critical(message)
    logging.shutdown()
    os._exit(1)


def parse_base_url(server_root: str) -> str:
    """Return the decoded path component of the public root URL.

    Raises ``ConfigurationError`` for strings containing control
    characters or that ``urlsplit`` rejects.
    """
    if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in server_root):
        msg = f"invalid control character in URL {server_root!r}"
        raise ConfigurationError(msg)
    try:
        parts = urlsplit(server_root)
    except ValueError as exc:
        msg = f"cannot parse URL {server_root!r}: {exc}"
        raise ConfigurationError(msg) from exc
    return unquote(parts.path)


class Server:
    """An embeddable HTTP(S) front-end.

    Exactly one per process. Register collaborators before ``start()``;
    registering afterwards works but races with in-flight requests and
    is not supported.

    Usage::

        server = Server(ServerConfig(root_path="./web", server_root="http://example.com/app"))
        server.add_routes(ApiService())
        server.start()
        ...
        server.shutdown()

    *on_fatal* receives a message when the listener fails; the default
    logs it and exits the process.
    """

    __slots__ = ("_app", "_base_url", "_closed", "_config", "_listener", "_on_fatal", "_router")

    def __init__(
        self,
        config: ServerConfig,
        *,
        on_fatal: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config

        try:
            base_url = parse_base_url(config.server_root)
        except ConfigurationError as exc:
            logger.error("Invalid ServerRoot setting: %s", exc)
            base_url = ""
        self._base_url = base_url

        self._router = Router()
        self._app = Dispatcher(self._router)
        self._listener: Listener | None = None
        self._closed = False
        self._on_fatal = on_fatal or exit_process

    # -- Configuration --

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def base_url(self) -> str:
        """Path prefix injected into the index document."""
        return self._base_url

    @property
    def root_path(self) -> Path:
        return Path(self._config.root_path)

    @property
    def address(self) -> str:
        """Listen address: ``localhost:<port>`` or ``:<port>`` for all interfaces."""
        if self._config.local_only:
            return f"localhost:{self._config.port}"
        return f":{self._config.port}"

    @property
    def host(self) -> str:
        """Bind host handed to the transport."""
        return "127.0.0.1" if self._config.local_only else "0.0.0.0"

    @property
    def router(self) -> Router:
        return self._router

    @property
    def app(self) -> Dispatcher:
        """The ASGI application the listener serves."""
        return self._app

    @property
    def listener(self) -> Listener | None:
        return self._listener

    # -- Routes --

    def add_routes(self, service: RoutedService) -> None:
        """Let *service* register its handlers on the shared router."""
        service.register_routes(self._router)

    def install_fallback_routes(self) -> None:
        """Install the static prefix route, then the index catch-all.

        Patterns a collaborator already claimed for every method are left
        alone, so calling this more than once is harmless.
        """
        cfg = self._config
        static_pattern = f"/{cfg.static_url.strip('/')}/{{path:path}}"

        if not self._router.has(static_pattern, ANY_METHOD):
            self._router.add(
                Route(
                    path=static_pattern,
                    handler=StaticFiles(self.root_path / cfg.static_dir),
                    name="static",
                )
            )

        if not self._router.has(INDEX_PATTERN, ANY_METHOD):
            self._router.add(
                Route(
                    path=INDEX_PATTERN,
                    handler=IndexPage(
                        self.root_path,
                        self._base_url,
                        template=cfg.index_template,
                        variable=cfg.base_url_variable,
                    ),
                    name="index",
                )
            )

    # -- Lifecycle --

    def start(self) -> None:
        """Install fallback routes and start listening in the background.

        Returns immediately. TLS is used iff enabled and both certificate
        files exist; the check happens once, here.
        """
        if self._listener is not None or self._closed:
            msg = "Server has already been started."
            raise ServerError(msg)

        self.install_fallback_routes()

        cfg = self._config
        tls = select_tls(cfg.ssl, cfg.cert_file, cfg.key_file, verify=cfg.verify_tls)
        listener = Listener(self._app, self.host, cfg.port, tls=tls)
        self._listener = listener

        logger.info("%s server started on :%d", listener.scheme, cfg.port)
        listener.serve_in_background(on_fatal=self._on_fatal, on_stopped=self._stopped)

    def wait_started(self, timeout: float = 5.0) -> bool:
        """Block until the listener accepts connections. False on timeout or failure."""
        if self._listener is None:
            return False
        return self._listener.wait_started(timeout)

    def shutdown(self, timeout: float = 5.0) -> None:
        """Close the listener immediately, without draining requests.

        Raises ``ServerClosedError`` if the server was never started or
        was already shut down, ``ServerError`` if the listener did not
        stop in time.
        """
        listener = self._listener
        if listener is None:
            msg = "Server was already shut down." if self._closed else "Server was never started."
            raise ServerClosedError(msg)

        self._listener = None
        self._closed = True
        listener.close(timeout)

    def _stopped(self) -> None:
        logger.info("http server stopped")
