"""Fallback index page — the single-page application's entry document.

Renders ``<root>/index.html`` for every path no other route claims,
injecting the base URL prefix so client-side code knows where the
application is mounted.
"""

import logging
from pathlib import Path

from frontdoor.http.request import Request
from frontdoor.http.response import Response
from frontdoor.templating.integration import create_environment, render_template

logger = logging.getLogger("frontdoor.server")

HTML_CONTENT_TYPE = "text/html; charset=utf-8"


class IndexPage:
    """Route handler rendering the index template.

    The render context holds only the base URL; nothing from the
    request is passed to the template.
    """

    __slots__ = ("_base_url", "_env", "_template", "_variable")

    def __init__(
        self,
        root_path: str | Path,
        base_url: str,
        *,
        template: str = "index.html",
        variable: str = "base_url",
    ) -> None:
        self._env = create_environment(root_path)
        self._template = template
        self._base_url = base_url
        self._variable = variable

    def __call__(self, request: Request) -> Response:
        try:
            body = render_template(self._env, self._template, {self._variable: self._base_url})
        except Exception as exc:
            logger.error("Unable to serve the %s file, err: %s", self._template, exc)
            return Response(body=b"", status=500, content_type=HTML_CONTENT_TYPE)
        return Response(body=body, content_type=HTML_CONTENT_TYPE)
