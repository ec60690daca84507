"""Internal utility functions for apcore-httpauth."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any

import anyio.to_thread


async def call_collaborator(func: Callable[..., Any], *args: Any) -> Any:
    """Invoke an application callback that may be sync or async.

    Coroutine functions are awaited on the current task. Plain callables run
    on a worker thread so a blocking credential store does not stall the
    event loop. A plain callable that hands back an awaitable is awaited too.
    """
    if inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(getattr(func, "__call__", None)):
        return await func(*args)
    result = await anyio.to_thread.run_sync(functools.partial(func, *args))
    if inspect.isawaitable(result):
        return await result
    return result
