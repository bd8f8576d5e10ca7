"""HTTP request and response types handed to route handlers."""

from frontdoor.http.headers import Headers
from frontdoor.http.query import QueryParams
from frontdoor.http.request import Request
from frontdoor.http.response import Response

__all__ = ["Headers", "QueryParams", "Request", "Response"]
