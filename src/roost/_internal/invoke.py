"""Invoke helpers: call sync or async hooks uniformly.

Roost hooks and listeners can be ``def`` or ``async def``. Any code that
calls a user-provided callable must handle both cases. This module keeps
the sync/async check in exactly one place.

Usage::

    from roost._internal.invoke import fire, invoke

    result = await invoke(hook, *args)   # from async code
    fire(listener, event)                # from sync code, fire-and-forget
"""

import asyncio
import inspect
from typing import Any

# Strong references to fire-and-forget tasks until they finish
_background: set[asyncio.Future[Any]] = set()


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def fire(handler: Any, *args: Any, **kwargs: Any) -> asyncio.Future[Any] | None:
    """Call a handler without waiting for it.

    Sync handlers run to completion immediately. If the handler returns an
    awaitable, it is scheduled on the running loop and the future is
    returned. Raises ``RuntimeError`` if an awaitable is returned while no
    loop is running.
    """
    result = handler(*args, **kwargs)
    if not inspect.isawaitable(result):
        return None

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        if inspect.iscoroutine(result):
            result.close()
        raise

    future = asyncio.ensure_future(result, loop=loop)
    _background.add(future)
    future.add_done_callback(_background.discard)
    return future
