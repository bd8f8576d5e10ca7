"""Call sync or async handlers uniformly.

Route handlers registered by collaborators can be ``def`` or
``async def``; this is the one place that checks which.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
