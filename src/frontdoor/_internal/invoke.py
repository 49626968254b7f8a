"""Invoke helpers — call sync or async callables uniformly.

Adapters, lifecycle hooks, and background tasks can be ``def`` or
``async def``. This module keeps the sync/async check in one place.

Usage::

    from frontdoor._internal.invoke import invoke

    result = await invoke(hook)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
