"""Blocking on deferred results returned by benchmark callbacks.

Supported shapes:
- ``concurrent.futures.Future``: waited on through a completion callback and a
  per-thread condition, no wrapper task is created.
- ``asyncio`` futures, coroutines and any other awaitable: run on a per-thread
  event loop. When the calling thread is already running a loop, the awaitable
  is handed to a helper loop thread and its future is waited on as above.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import threading
from typing import Any, Awaitable, Coroutine

_local = threading.local()
_helper_lock = threading.Lock()
_helper_loop: asyncio.AbstractEventLoop | None = None


class _Waiter:
    """Completion signal owned by one thread."""

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._completed = False

    @classmethod
    def current(cls) -> "_Waiter":
        waiter = getattr(_local, "waiter", None)
        if waiter is None:
            waiter = _local.waiter = cls()
        return waiter

    def _on_done(self, _future: concurrent.futures.Future) -> None:
        with self._condition:
            self._completed = True
            self._condition.notify_all()

    def wait(self, future: concurrent.futures.Future) -> None:
        with self._condition:
            self._completed = False
            # runs the callback right away when the future is already done
            future.add_done_callback(self._on_done)
            if not self._completed:
                self._condition.wait_for(lambda: self._completed)


def is_deferred(value: Any) -> bool:
    """True for futures and awaitables, False for plain values."""

    return isinstance(value, concurrent.futures.Future) or inspect.isawaitable(value)


def discard(value: Any) -> None:
    """Releases a deferred result that will never be waited on."""

    if inspect.iscoroutine(value):
        value.close()
    elif isinstance(value, concurrent.futures.Future) or asyncio.isfuture(value):
        value.cancel()


def get_result(value: Any) -> Any:
    """Blocks until ``value`` resolves and returns its result.

    Plain values are returned unchanged; exceptions raised by the deferred work
    propagate to the caller.
    """

    if isinstance(value, concurrent.futures.Future):
        return _wait_future(value)
    if asyncio.isfuture(value):
        return _wait_asyncio_future(value)
    if inspect.isawaitable(value):
        return _run_awaitable(value)
    return value


def _wait_future(future: concurrent.futures.Future) -> Any:
    if not future.done():
        _Waiter.current().wait(future)
    return future.result()


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _as_coroutine(awaitable: Awaitable[Any]) -> Coroutine[Any, Any, Any]:
    if inspect.iscoroutine(awaitable):
        return awaitable
    return _await(awaitable)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _thread_loop() -> asyncio.AbstractEventLoop:
    loop = getattr(_local, "loop", None)
    if loop is None or loop.is_closed():
        loop = _local.loop = asyncio.new_event_loop()
    return loop


def _get_helper_loop() -> asyncio.AbstractEventLoop:
    global _helper_loop

    with _helper_lock:
        if _helper_loop is None or _helper_loop.is_closed():
            loop = asyncio.new_event_loop()
            thread = threading.Thread(target=loop.run_forever, name="benchplan-await", daemon=True)
            thread.start()
            _helper_loop = loop
        return _helper_loop


def _run_awaitable(awaitable: Awaitable[Any]) -> Any:
    coroutine = _as_coroutine(awaitable)
    if _running_loop() is None:
        return _thread_loop().run_until_complete(coroutine)
    return _wait_future(asyncio.run_coroutine_threadsafe(coroutine, _get_helper_loop()))


def _wait_asyncio_future(future: asyncio.Future) -> Any:
    if future.done():
        return future.result()

    loop = future.get_loop()
    if not loop.is_running():
        return loop.run_until_complete(future)
    if loop is _running_loop():
        raise RuntimeError("Cannot block on a future of the event loop running in this thread")
    return _wait_future(asyncio.run_coroutine_threadsafe(_await(future), loop))


def close_thread_loop() -> None:
    """Closes the event loop the calling thread used for awaiting, if any."""

    loop = getattr(_local, "loop", None)
    if loop is None or loop.is_running():
        return
    _local.loop = None
    if loop.is_closed():
        return
    try:
        loop.run_until_complete(loop.shutdown_asyncgens())
    finally:
        loop.close()
