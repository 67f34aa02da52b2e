import inspect
from functools import partial
from typing import Callable, Any

import anyio


async def call_maybe_async(fn: Callable, *args: Any, **kwargs: Any):
    """
    Call fn without blocking the event loop:
    - coroutine functions are awaited directly,
    - plain callables run in a worker thread (requests, twilio, ...),
    - an awaitable returned from a worker thread is awaited too.
    """
    if inspect.iscoroutinefunction(fn):
        return await fn(*args, **kwargs)

    result = await anyio.to_thread.run_sync(partial(fn, *args, **kwargs))
    if inspect.isawaitable(result):
        return await result
    return result
