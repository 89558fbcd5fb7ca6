from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, TypeVar, Union

from .errors import FrenoError
from .instrumenter import CALLED
from .throttler import BaseThrottler

T = TypeVar("T")


async def async_sleep_for(seconds: float) -> float:
    """Default async sleep primitive; the cancellation point of the loop."""
    await asyncio.sleep(seconds)
    return seconds


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class AsyncThrottler(BaseThrottler):
    """
    asyncio twin of Throttler.

    Usage:
        throttler = AsyncThrottler(aclient, "github", static_mapper("mysqla"))
        await throttler.throttle(lambda: amds.upsert_bars(bars))

    The client's ``check``, the sleep primitive and the unit of work may be
    coroutine functions or plain callables. Cancelling the task while it
    waits propagates CancelledError without a terminal event.

    The throttle.called event goes through the instrumenter's ``ainstrument``
    when it has one, so the whole poll loop and the work run inside its scope.
    """

    def _default_sleep(self) -> Callable[[float], Any]:
        return async_sleep_for

    async def throttle(self, work: Callable[[], Union[T, Awaitable[T]]], context: Any = None) -> T:
        def body():
            return self._throttle(work, context)

        ainstrument = getattr(self._instrumenter, "ainstrument", None)
        if ainstrument is not None:
            return await ainstrument(CALLED, {}, body)
        return await self._instrumenter.instrument(CALLED, {}, body)

    async def wait(self) -> float:
        """Sleep one poll interval; returns the seconds actually waited."""
        return await _maybe_await(self._sleep(self._wait_seconds))

    # ---------- internals

    async def _throttle(self, work: Callable[[], Union[T, Awaitable[T]]], context: Any) -> T:
        waited = 0
        while True:
            if await self._all_stores_caught_up(context):
                self._record_success(waited)
                return await _maybe_await(work())
            waited += await self.wait()
            self._check_waited(waited)

    async def _all_stores_caught_up(self, context: Any) -> bool:
        for store_name in self._mapper(context):
            try:
                healthy = await _maybe_await(
                    self._client.check(app=self._app, store_name=store_name)
                )
            except FrenoError as e:
                raise self._client_failed(e, store_name) from e
            if not healthy:
                return False
        return True
