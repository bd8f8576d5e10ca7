"""Static file serving for the ``/static/`` prefix route.

Registered as a catch-all route handler; the router has already
stripped the prefix, so the remaining path arrives as the ``path``
parameter and is looked up under the configured directory.
"""

import mimetypes
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path

from frontdoor.errors import Forbidden, NotFound
from frontdoor.http.request import Request
from frontdoor.http.response import Response


class StaticFiles:
    """Route handler that serves files from a directory.

    Security: resolves symlinks and verifies the final path is within
    the configured directory to prevent path traversal.

    Usage::

        router.add_prefix("/static", StaticFiles("./web/static"))
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_param")

    def __init__(
        self,
        directory: str | Path,
        *,
        index: str = "index.html",
        cache_control: str | None = None,
        param: str = "path",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control
        self._param = param

    @property
    def directory(self) -> Path:
        return self._directory

    def __call__(self, request: Request) -> Response:
        """Serve the file named by the stripped request path."""
        relative = request.path_params.get(self._param, "")

        try:
            file_path = (self._directory / relative).resolve() if relative else self._directory
        except ValueError:
            # Embedded NUL bytes cannot name a file
            raise NotFound(f"{request.path} not found") from None

        if not file_path.is_relative_to(self._directory):
            raise Forbidden()

        # Directory: serve its index file if there is one
        if file_path.is_dir():
            file_path = file_path / self._index

        if not file_path.is_file():
            raise NotFound(f"{request.path} not found")

        return self._serve_file(file_path, request)

    def _serve_file(self, file_path: Path, request: Request) -> Response:
        """Read a file and build a response, honouring If-Modified-Since."""
        stat = file_path.stat()
        last_modified = formatdate(stat.st_mtime, usegmt=True)

        if _not_modified_since(request.headers.get("if-modified-since"), stat.st_mtime):
            return self._with_cache_headers(
                Response(body=b"", status=304).with_header("Last-Modified", last_modified)
            )

        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/") or content_type == "application/javascript":
            content_type = f"{content_type}; charset=utf-8"

        body = file_path.read_bytes()
        response = (
            Response(body=body, content_type=content_type)
            .with_header("Content-Length", str(len(body)))
            .with_header("Last-Modified", last_modified)
        )
        return self._with_cache_headers(response)

    def _with_cache_headers(self, response: Response) -> Response:
        if self._cache_control:
            return response.with_header("Cache-Control", self._cache_control)
        return response


def _not_modified_since(header: str | None, mtime: float) -> bool:
    """Whether an If-Modified-Since value covers a file modified at *mtime*."""
    if not header:
        return False
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    # HTTP dates have one-second resolution
    return int(mtime) <= since.timestamp()
