"""ASGI response sending — translates a Response into ASGI messages."""

import logging

from frontdoor._internal.asgi import Send
from frontdoor.http.response import Response

logger = logging.getLogger("frontdoor.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response* as one ``http.response.start`` and one body message.

    With *head* set the headers (including ``Content-Length``) describe
    the full body, but no body bytes are sent.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    explicit_length = False
    for name, value in response.headers:
        lowered = name.lower()
        if lowered == "content-length":
            explicit_length = True
        raw_headers.append((lowered.encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes if _body_allowed(response.status) else b""

    if not explicit_length and _body_allowed(response.status):
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )
