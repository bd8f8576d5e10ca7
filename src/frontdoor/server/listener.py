"""Background listener — uvicorn serving the dispatcher on its own thread.

The thread owns its own asyncio loop. ``close()`` is the only
synchronization point with the thread that started it.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

import uvicorn

from frontdoor._internal.asgi import Receive, Scope, Send
from frontdoor.errors import ServerError
from frontdoor.server.tls import TLSFiles

logger = logging.getLogger("frontdoor.server")

_POLL_INTERVAL = 0.05


class Listener:
    """One uvicorn server bound to a host and port, optionally with TLS."""

    __slots__ = ("_closing", "_server", "_thread", "host", "port", "tls")

    def __init__(
        self,
        app: Callable[[Scope, Receive, Send], object],
        host: str,
        port: int,
        *,
        tls: TLSFiles | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.tls = tls
        config = uvicorn.Config(
            app,
            host=host,
            port=port,
            ssl_certfile=tls.certfile if tls else None,
            ssl_keyfile=tls.keyfile if tls else None,
            lifespan="on",
            access_log=False,
            # Logging is configured by the hosting process
            log_config=None,
        )
        self._server = uvicorn.Server(config)
        self._thread: threading.Thread | None = None
        self._closing = threading.Event()

    @property
    def scheme(self) -> str:
        return "https" if self.tls else "http"

    @property
    def started(self) -> bool:
        """True once the listening sockets accept connections."""
        return bool(self._server.started)

    def serve_in_background(
        self,
        *,
        on_fatal: Callable[[str], None],
        on_stopped: Callable[[], None],
    ) -> threading.Thread:
        """Start serving on a daemon thread and return immediately.

        *on_stopped* runs when the listener exits after ``close()``;
        *on_fatal* runs with a message when it exits for any other reason.
        """
        if self._thread is not None:
            msg = "Listener is already serving."
            raise ServerError(msg)

        def _runner() -> None:
            try:
                self._server.run()
            # uvicorn reports bind failures by calling sys.exit(1)
            except (Exception, SystemExit) as exc:
                on_fatal(f"{self.scheme} listener on {self.host}:{self.port} failed: {exc!r}")
                return
            if self._closing.is_set():
                on_stopped()
            else:
                on_fatal(f"{self.scheme} listener on {self.host}:{self.port} exited unexpectedly")

        self._thread = threading.Thread(target=_runner, name="frontdoor-listener", daemon=True)
        self._thread.start()
        return self._thread

    def wait_started(self, timeout: float) -> bool:
        """Block until the listener accepts connections or gives up."""
        deadline = time.monotonic() + timeout
        while not self.started:
            if self._thread is None or not self._thread.is_alive():
                return False
            if time.monotonic() >= deadline:
                return False
            time.sleep(_POLL_INTERVAL)
        return True

    def close(self, timeout: float = 5.0) -> None:
        """Hard-close: stop accepting, drop open connections, wait for the thread.

        In-flight requests are not drained.
        """
        self._closing.set()
        if self._thread is None:
            return

        # Let start-up finish so the sockets it opens are closed by shutdown
        self.wait_started(timeout)

        self._server.force_exit = True
        self._server.should_exit = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            msg = f"Listener on {self.host}:{self.port} did not stop within {timeout}s."
            raise ServerError(msg)
